"""Signals for analyst profile lifecycle."""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.db.models.signals import post_save
from django.dispatch import receiver

from accounts.models import AnalystProfile

UserModel = get_user_model()


@receiver(post_save, sender=UserModel)
def ensure_profile_for_user(sender, instance, created: bool, **kwargs) -> None:
    """Create an AnalystProfile whenever a new User is created.

    Superusers start with the admin role; everyone else starts as a user.
    """

    if kwargs.get("raw", False):
        return

    if not created:
        return

    role = AnalystProfile.Role.ADMIN if instance.is_superuser else AnalystProfile.Role.USER
    AnalystProfile.objects.get_or_create(
        user=instance,
        defaults={"display_name": instance.get_username(), "role": role},
    )
