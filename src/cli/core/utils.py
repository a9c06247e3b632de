"""Shared constants for CLI commands."""

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 2

BACKUP_WARNING = (
    "Use this at your own risk. If something goes wrong, it could break your site. "
    "Before running this, make sure to back up your database running `wp db export`."
)

RESTORE_ADVICE = (
    "You should check your site to see if it's broken. If it is, you can fix it "
    "by restoring your database from backups."
)
