from __future__ import annotations

from flask import Flask, request

from ..auth.context import current_viewer, token_required
from ..common.http import json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.asset_service

    @app.route("/api/assets", methods=["GET"], endpoint="list_assets")
    @token_required
    def list_assets():
        rows = service.list_for_viewer(current_viewer(), employee_id=request.args.get("employee"))
        return ok(rows, count=len(rows))

    @app.route("/api/assets", methods=["POST"], endpoint="allocate_asset")
    @token_required
    def allocate_asset():
        return ok(service.allocate(current_viewer(), json_body()), status=201, message="Asset allocated")

    @app.route("/api/assets/<int:asset_id>/revoke", methods=["PATCH"], endpoint="revoke_asset")
    @token_required
    def revoke_asset(asset_id: int):
        return ok(service.revoke(current_viewer(), asset_id), message="Asset revoked")
