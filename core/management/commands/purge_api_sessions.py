"""Delete expired REST API sessions.

Expired tokens already fail authentication; this command only reclaims the
rows. Active sessions are never touched.
"""

from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from accounts.models import ApiSession
from accounts.tokens import purge_expired_tokens


class Command(BaseCommand):
    """Purge expired API token sessions."""

    help = "Delete expired API sessions (active sessions are retained)."

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument(
            "--check",
            action="store_true",
            help="Dry-run: print how many sessions would be deleted.",
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Required to actually delete rows.",
        )

    def handle(self, *args, **options) -> str | None:
        """Run the command."""

        check: bool = options["check"]
        force: bool = options["force"]

        if check and force:
            raise CommandError("Use either --check or --force, not both.")
        if not check and not force:
            raise CommandError("Refusing to delete without explicit intent; pass --check or --force.")

        if check:
            self.stdout.write(f"[CHECK] would_delete={ApiSession.objects.expired().count()}")
            return None

        deleted = purge_expired_tokens()
        self.stdout.write(self.style.SUCCESS(f"[DELETE] deleted={deleted}"))
        return None
