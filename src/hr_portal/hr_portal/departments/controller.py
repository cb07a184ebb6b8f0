from __future__ import annotations

from flask import Flask, request

from ..auth.context import current_viewer, token_required
from ..common.http import json_body, ok
from ..common.validators import optional_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.department_service

    @app.route("/api/departments", methods=["GET"], endpoint="list_departments")
    @token_required
    def list_departments():
        rows = service.list_tree()
        return ok(rows, count=len(rows))

    @app.route("/api/departments/parent-options", methods=["GET"], endpoint="department_parent_options")
    @token_required
    def parent_options():
        editing_id = optional_int(request.args.get("editing"), "Department")
        return ok(service.parent_candidates(editing_id))

    @app.route("/api/departments/<int:department_id>", methods=["GET"], endpoint="get_department")
    @token_required
    def get_department(department_id: int):
        return ok(service.get(department_id))

    @app.route("/api/departments", methods=["POST"], endpoint="create_department")
    @token_required
    def create_department():
        data = service.create(current_viewer(), json_body())
        return ok(data, status=201, message="Department created successfully")

    @app.route("/api/departments/<int:department_id>", methods=["PUT"], endpoint="update_department")
    @token_required
    def update_department(department_id: int):
        data = service.update(current_viewer(), department_id, json_body())
        return ok(data, message="Department updated successfully")

    @app.route("/api/departments/<int:department_id>", methods=["DELETE"], endpoint="delete_department")
    @token_required
    def delete_department(department_id: int):
        service.delete(current_viewer(), department_id)
        return ok(message="Department deleted successfully")
