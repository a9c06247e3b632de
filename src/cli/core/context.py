"""Context class for the anonymizer CLI."""

import sys
from typing import Optional
from rich.console import Console

from dbanon.config import AnonymizeConfig
from dbanon.session import StoreGateway


class Context:
    """Shared context for CLI commands."""

    def __init__(self):
        self.config: Optional[AnonymizeConfig] = None
        self.gateway: Optional[StoreGateway] = None
        self.verbose: bool = False
        self.console = Console()
        self.stderr_console = Console(file=sys.stderr)
