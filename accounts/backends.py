"""Authentication backend for demo-mode allowlisted credentials."""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.contrib.auth.backends import BaseBackend
from django.http import HttpRequest

from accounts.models import AnalystProfile
from core.demo import demo_mode_enabled, find_demo_user

logger = logging.getLogger(__name__)


class DemoCredentialsBackend(BaseBackend):
    """Authenticate allowlisted demo credentials while demo mode is enabled.

    The first successful sign-in provisions a local user with an unusable
    password so Django sessions and `login_required` work unchanged. Outside
    demo mode this backend never authenticates anyone.
    """

    def authenticate(
        self,
        request: HttpRequest | None,
        username: str | None = None,
        password: str | None = None,
        **kwargs,
    ):
        """Return the provisioned user for an allowlisted pair, else None."""

        if not demo_mode_enabled():
            return None
        demo_user = find_demo_user(username, password)
        if demo_user is None:
            return None

        UserModel = get_user_model()
        user, created = UserModel.objects.get_or_create(username=demo_user.username)
        if created:
            user.set_unusable_password()
            user.save(update_fields=["password"])
            logger.info("Provisioned demo user %s", demo_user.username)

        profile, _ = AnalystProfile.objects.update_or_create(
            user=user,
            defaults={"display_name": demo_user.display_name, "role": demo_user.role},
        )
        # Replace the profile cached by the post_save signal.
        user.profile = profile
        return user if user.is_active else None

    def get_user(self, user_id: int):
        """Return the user for a session-stored id."""

        UserModel = get_user_model()
        try:
            user = UserModel.objects.get(pk=user_id)
        except UserModel.DoesNotExist:
            return None
        return user if user.is_active else None
