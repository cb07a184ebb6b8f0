from __future__ import annotations

from flask import Flask, Response, request

from ..auth.context import current_viewer, token_required
from ..common.http import json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.employee_service

    @app.route("/api/employees", methods=["GET"], endpoint="list_employees")
    @token_required
    def list_employees():
        rows, sensitive = service.list_for_viewer(
            current_viewer(),
            status=request.args.get("status"),
            department_id=request.args.get("department"),
            search=request.args.get("search"),
        )
        return ok(rows, count=len(rows), canViewSensitiveData=sensitive)

    @app.route("/api/employees/stats", methods=["GET"], endpoint="employee_stats")
    @token_required
    def employee_stats():
        return ok(service.stats(current_viewer()))

    @app.route("/api/employees/export/joinings", methods=["GET"], endpoint="export_joinings")
    @token_required
    def export_joinings():
        content = service.export_joinings_csv(
            current_viewer(),
            start=request.args.get("start_date"),
            end=request.args.get("end_date"),
        )
        return Response(
            content,
            mimetype="text/csv",
            headers={"Content-Disposition": "attachment; filename=employee_joinings.csv"},
        )

    @app.route("/api/employees/<int:employee_id>", methods=["GET"], endpoint="get_employee")
    @token_required
    def get_employee(employee_id: int):
        data, sensitive = service.get_for_viewer(current_viewer(), employee_id)
        return ok(data, canViewSensitiveData=sensitive)

    @app.route("/api/employees", methods=["POST"], endpoint="create_employee")
    @token_required
    def create_employee():
        viewer = current_viewer()
        new_id = service.create(viewer, json_body())
        data, sensitive = service.get_for_viewer(viewer, new_id)
        return ok(data, status=201, message="Employee created successfully", canViewSensitiveData=sensitive)

    @app.route("/api/employees/<int:employee_id>", methods=["PUT"], endpoint="update_employee")
    @token_required
    def update_employee(employee_id: int):
        viewer = current_viewer()
        data = service.update(viewer, employee_id, json_body())
        return ok(data, message="Employee updated successfully", canViewSensitiveData=service.can_view_sensitive_data(viewer))

    @app.route("/api/employees/<int:employee_id>", methods=["DELETE"], endpoint="delete_employee")
    @token_required
    def delete_employee(employee_id: int):
        service.delete(current_viewer(), employee_id)
        return ok(message="Employee deleted successfully")

    @app.route("/api/employees/<int:employee_id>/status", methods=["PATCH"], endpoint="set_employee_status")
    @token_required
    def set_employee_status(employee_id: int):
        body = json_body()
        data = service.set_status(current_viewer(), employee_id, status=body.get("status") or "", reason=body.get("reason") or "")
        return ok(data, message=f"Employee status updated to {data['status']}")
