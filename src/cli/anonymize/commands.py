"""Anonymize command classes."""

import click

from cli.core.base import BaseCommand
from cli.core.utils import EXIT_SUCCESS, EXIT_ERROR, BACKUP_WARNING
from cli.anonymize.display import display_rule_plan, display_summary, display_failure
from dbanon.rules import RuleResolver
from dbanon.runner import requested_groups, run_anonymization, site_host


class AnonymizeCommand(BaseCommand):
    """Anonymize the configured WordPress database in place."""

    def confirm(self) -> bool:
        """Warn the operator and ask for confirmation, unless disabled."""
        config = self.config
        if not config.confirm:
            return True

        self.console.print()
        self.console.print(f"⚠️  {BACKUP_WARNING}", style="bold yellow", soft_wrap=True)
        host = site_host(self.gateway, config.table_prefix)
        return click.confirm(f"\nAre you sure you want to anonymize {host}'s database?", default=False)

    def execute(self) -> int:
        config = self.config
        try:
            if self.ctx.verbose:
                resolver = RuleResolver(config.table_prefix, config.user_whitelist)
                display_rule_plan(self.ctx, resolver.groups(requested_groups(config), config.user_meta))

            if not self.confirm():
                self.console.print("Aborted.", style="yellow")
                return EXIT_ERROR

            self.console.print()
            summary = run_anonymization(self.gateway, config)
        except Exception as e:
            return self.handle_exception(e)

        display_summary(self.ctx, summary)

        if not summary.ok:
            display_failure(self.ctx, summary)
            return EXIT_ERROR

        self.console.print("✅ Successfully anonymized database.", style="bold green")
        return EXIT_SUCCESS
