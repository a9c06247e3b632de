"""Base command classes for the anonymizer CLI."""

import logging
from abc import ABC, abstractmethod

from cli.core.context import Context
from cli.core.utils import EXIT_CONFIG_ERROR

logger = logging.getLogger(__name__)


class BaseCommand(ABC):
    """
    Base class for commands that work on one configured database.

    Commands are constructed after the configuration is loaded and the
    gateway connected, so both are available from the start.
    """

    def __init__(self, ctx: Context):
        self.ctx = ctx
        self.config = ctx.config
        self.gateway = ctx.gateway
        self.console = ctx.console

    @abstractmethod
    def execute(self, **kwargs) -> int:
        """Execute command. Returns exit code."""
        pass

    def handle_exception(self, e: Exception) -> int:
        """
        Report an error raised before the run produced a summary.

        The traceback goes to the log (console in verbose mode, and the audit
        file when one is configured); the operator sees a one-line message.
        """
        logger.debug(f"{type(self).__name__} aborted", exc_info=True)
        self.ctx.stderr_console.print(f"❌ Error: {e}", style="bold red")
        return EXIT_CONFIG_ERROR
