from __future__ import annotations

from flask import Flask

from ..auth.context import current_viewer, token_required
from ..common.http import ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/team/overview", methods=["GET"], endpoint="team_overview")
    @token_required
    def team_overview():
        return ok(container.team_service.overview(current_viewer()))
