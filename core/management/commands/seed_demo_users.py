"""Create (or refresh) local accounts for the demo credential allowlist.

Demo mode accepts the allowlisted pairs without any database rows of their
own. Seeding turns the same pairs into ordinary password-hashed users so a
deployment with a real database can keep offering the demo logins.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from accounts.models import AnalystProfile
from core.demo import DEMO_USERS


class Command(BaseCommand):
    """Seed password-hashed users for each demo allowlist entry."""

    help = "Create users for the demo allowlist with hashed passwords and profiles."

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument(
            "--check",
            action="store_true",
            help="Dry-run: print which users would be created or updated.",
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Required to actually write users.",
        )

    def handle(self, *args, **options) -> str | None:
        """Run the command."""

        check: bool = options["check"]
        force: bool = options["force"]

        if check and force:
            raise CommandError("Use either --check or --force, not both.")
        if not check and not force:
            raise CommandError("Refusing to write users without explicit intent; pass --check or --force.")

        UserModel = get_user_model()
        existing = set(
            UserModel.objects.filter(username__in=[demo.username for demo in DEMO_USERS]).values_list(
                "username", flat=True
            )
        )
        mode = "CHECK" if check else "SEED"
        for demo in DEMO_USERS:
            action = "update" if demo.username in existing else "create"
            self.stdout.write(f"[{mode}] {action} {demo.username} ({demo.role})")
        if check:
            return None

        with transaction.atomic():
            for demo in DEMO_USERS:
                user, _created = UserModel.objects.get_or_create(username=demo.username)
                user.set_password(demo.password)
                user.is_staff = demo.role == AnalystProfile.Role.ADMIN
                user.save()
                AnalystProfile.objects.update_or_create(
                    user=user,
                    defaults={"display_name": demo.display_name, "role": demo.role},
                )

        self.stdout.write(self.style.SUCCESS(f"Seeded {len(DEMO_USERS)} demo users."))
        return None
