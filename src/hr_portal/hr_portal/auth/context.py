"""Per-request viewer context.

``token_required`` resolves the bearer token once and stores the resulting
``Viewer`` on ``flask.g``; handlers read it back with ``current_viewer()``.
"""

from __future__ import annotations

from functools import wraps

from flask import current_app, g, request

from ..core.exceptions import AuthenticationError
from .model import Viewer


def _bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Not authorized, no token")
    return token.strip()


def token_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        auth_service = current_app.extensions["hr_portal"].auth_service
        g.viewer = auth_service.resolve(_bearer_token())
        return view(*args, **kwargs)

    return wrapper


def current_viewer() -> Viewer:
    viewer = g.get("viewer")
    if viewer is None:
        raise AuthenticationError("Not authorized")
    return viewer
