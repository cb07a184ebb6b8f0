from __future__ import annotations

from flask import Flask, Response, request

from ..auth.context import current_viewer, token_required
from ..common.http import json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @token_required
    def check_in():
        return ok(service.check_in(current_viewer()), message="Checked in successfully")

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @token_required
    def check_out():
        return ok(service.check_out(current_viewer()), message="Checked out successfully")

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @token_required
    def today():
        return ok(service.today(current_viewer()))

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_history")
    @token_required
    def history():
        rows = service.history(
            current_viewer(),
            employee_id=request.args.get("employee"),
            team=request.args.get("scope") == "team",
            start=request.args.get("start_date"),
            end=request.args.get("end_date"),
        )
        return ok(rows, count=len(rows))

    @app.route("/api/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    @token_required
    def stats():
        return ok(
            service.stats(
                current_viewer(),
                employee_id=request.args.get("employee"),
                start=request.args.get("start_date"),
                end=request.args.get("end_date"),
            )
        )

    @app.route("/api/attendance/<int:attendance_id>", methods=["PUT"], endpoint="attendance_update")
    @token_required
    def update_record(attendance_id: int):
        data = service.update_record(current_viewer(), attendance_id, json_body())
        return ok(data, message="Attendance updated successfully")

    @app.route("/api/attendance/export", methods=["GET"], endpoint="attendance_export")
    @token_required
    def export():
        content = service.export_csv(
            current_viewer(),
            start=request.args.get("start_date"),
            end=request.args.get("end_date"),
        )
        return Response(
            content,
            mimetype="text/csv",
            headers={"Content-Disposition": "attachment; filename=attendance_report.csv"},
        )
