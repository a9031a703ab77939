"""Post-login and post-action redirect helpers.

`next` values come from the client, so every candidate is checked with
Django's `url_has_allowed_host_and_scheme` before it is followed.
"""

from __future__ import annotations

from django.conf import settings
from django.core.exceptions import DisallowedHost
from django.http import HttpRequest, HttpResponseRedirect
from django.shortcuts import redirect
from django.utils.http import url_has_allowed_host_and_scheme


def is_safe_next(request: HttpRequest, url: str | None) -> bool:
    """Return True when `url` stays on an allowed host and scheme.

    Args:
        request: Incoming request used for host + scheme validation.
        url: Candidate redirect target.
    """

    value = (url or "").strip()
    if not value:
        return False
    hosts = set(settings.ALLOWED_HOSTS)
    try:
        hosts.add(request.get_host())
    except DisallowedHost:
        pass
    return url_has_allowed_host_and_scheme(url=value, allowed_hosts=hosts, require_https=request.is_secure())


def redirect_to_next(request: HttpRequest, *, fallback: str) -> HttpResponseRedirect:
    """Redirect to the request's `next` parameter when safe, else to `fallback`.

    `next` is read from POST data first, then the query string.
    """

    for candidate in (request.POST.get("next"), request.GET.get("next")):
        if is_safe_next(request, candidate):
            return redirect(candidate.strip())
    return redirect(fallback)
