from __future__ import annotations

from flask import Flask, request

from ..auth.context import current_viewer, token_required
from ..common.http import json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    @app.route("/api/leaves", methods=["GET"], endpoint="list_leaves")
    @token_required
    def list_leaves():
        rows = service.list_for_viewer(
            current_viewer(),
            status=request.args.get("status"),
            employee_id=request.args.get("employee"),
        )
        return ok(rows, count=len(rows))

    @app.route("/api/leaves", methods=["POST"], endpoint="apply_leave")
    @token_required
    def apply_leave():
        data = service.apply(current_viewer(), json_body())
        return ok(data, status=201, message="Leave application submitted")

    @app.route("/api/leaves/<int:leave_id>", methods=["GET"], endpoint="get_leave")
    @token_required
    def get_leave(leave_id: int):
        return ok(service.get(current_viewer(), leave_id))

    @app.route("/api/leaves/<int:leave_id>/decision", methods=["PUT"], endpoint="decide_leave")
    @token_required
    def decide_leave(leave_id: int):
        body = json_body()
        data = service.decide(current_viewer(), leave_id, status=body.get("status") or "", remarks=body.get("remarks") or "")
        return ok(data, message=f"Leave {data['status']}")

    @app.route("/api/leaves/<int:leave_id>", methods=["DELETE"], endpoint="cancel_leave")
    @token_required
    def cancel_leave(leave_id: int):
        service.cancel(current_viewer(), leave_id)
        return ok(message="Leave cancelled")

    @app.route("/api/leaves/balance", methods=["GET"], endpoint="my_leave_balance")
    @token_required
    def my_leave_balance():
        return ok(service.balance(current_viewer(), request.args.get("employee")))

    @app.route("/api/leaves/balance/<int:employee_id>", methods=["PUT"], endpoint="set_leave_balance")
    @token_required
    def set_leave_balance(employee_id: int):
        data = service.set_balance(current_viewer(), employee_id, json_body())
        return ok(data, message="Leave balance updated")
