from __future__ import annotations

from flask import Flask

from ..auth.context import current_viewer, token_required
from ..common.http import json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.resignation_service

    @app.route("/api/resignations", methods=["GET"], endpoint="list_resignations")
    @token_required
    def list_resignations():
        rows = service.list_for_viewer(current_viewer())
        return ok(rows, count=len(rows))

    @app.route("/api/resignations", methods=["POST"], endpoint="submit_resignation")
    @token_required
    def submit_resignation():
        return ok(service.submit(current_viewer(), json_body()), status=201)

    @app.route("/api/resignations/<int:resignation_id>", methods=["GET"], endpoint="get_resignation")
    @token_required
    def get_resignation(resignation_id: int):
        return ok(service.get(current_viewer(), resignation_id))

    @app.route("/api/resignations/<int:resignation_id>/status", methods=["PUT"], endpoint="decide_resignation")
    @token_required
    def decide_resignation(resignation_id: int):
        body = json_body()
        data = service.decide(current_viewer(), resignation_id, status=body.get("status") or "", remarks=body.get("remarks") or "")
        return ok(data)

    @app.route("/api/resignations/<int:resignation_id>/exit-procedure", methods=["PATCH"], endpoint="update_exit_procedure")
    @token_required
    def update_exit_procedure(resignation_id: int):
        return ok(service.update_procedure(current_viewer(), resignation_id, json_body()))

    @app.route("/api/resignations/<int:resignation_id>/last-working-date", methods=["PATCH"], endpoint="update_last_working_date")
    @token_required
    def update_last_working_date(resignation_id: int):
        body = json_body()
        return ok(service.update_last_working_date(current_viewer(), resignation_id, body.get("last_working_date")))
