"""Demo mode helpers.

Demo mode lets the portal run without a configured backend database: sign-in
checks a small fixed allowlist and uploads live only in the browser session.
It is a demonstration affordance and is not a substitute for a real identity
provider.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from django.conf import settings

DEMO_DATASET_SESSION_KEY: Final[str] = "bank_demo_dataset"


@dataclass(frozen=True, slots=True)
class DemoUser:
    """An allowlisted demo credential pair with display metadata."""

    username: str
    password: str
    display_name: str
    role: str


DEMO_USERS: Final[tuple[DemoUser, ...]] = (
    DemoUser(username="admin", password="admin123", display_name="Administrator", role="admin"),
    DemoUser(username="user", password="user123", display_name="John Doe", role="analyst"),
    DemoUser(username="manager", password="manager123", display_name="Jane Smith", role="manager"),
)


def demo_mode_enabled() -> bool:
    """Return True when the portal runs in demo mode."""

    return bool(getattr(settings, "BANK_DEMO_MODE", False))


def find_demo_user(username: str | None, password: str | None) -> DemoUser | None:
    """Return the allowlist entry exactly matching a credential pair.

    Args:
        username: Submitted username.
        password: Submitted password.

    Returns:
        The matching DemoUser, or None when the pair is not allowlisted.
    """

    if not username or password is None:
        return None
    for candidate in DEMO_USERS:
        if candidate.username == username and candidate.password == password:
            return candidate
    return None
