"""Template context processors for the analytics portal."""

from __future__ import annotations

from django.http import HttpRequest

from core.demo import DEMO_USERS, demo_mode_enabled


def demo_mode(request: HttpRequest) -> dict[str, object]:
    """Expose demo mode state (and the demo allowlist hints) to all templates.

    Args:
        request: Current request object.

    Returns:
        Context dict with `demo_mode` and `demo_users`.
    """

    enabled = demo_mode_enabled()
    return {"demo_mode": enabled, "demo_users": DEMO_USERS if enabled else ()}
