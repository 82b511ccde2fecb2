"""Request-level inputs shared by the directory routers."""

from __future__ import annotations

from fastapi import Request

from taskforce.config import settings
from taskforce.domain.directory.models import ANONYMOUS, Viewer
from taskforce.domain.directory.search_params import RawSearchParams


def get_raw_params(request: Request) -> RawSearchParams:
    """Query string as a mapping; repeated keys become lists."""
    raw: dict[str, list[str]] = {}
    for key, value in request.query_params.multi_items():
        raw.setdefault(key, []).append(value)
    return raw


def get_viewer(request: Request) -> Viewer:
    """Authenticated when the upstream auth layer set the user header."""
    user = request.headers.get(settings.auth_user_header, "")
    if user.strip():
        return Viewer(is_authenticated=True)
    return ANONYMOUS
