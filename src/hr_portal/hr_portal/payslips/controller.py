from __future__ import annotations

from flask import Flask, request, send_file

from ..auth.context import current_viewer, token_required
from ..common.http import ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.payslip_service

    @app.route("/api/payslips", methods=["GET"], endpoint="list_payslips")
    @token_required
    def list_payslips():
        rows = service.list_for_viewer(
            current_viewer(),
            employee_id=request.args.get("employee"),
            month=request.args.get("month"),
            year=request.args.get("year"),
        )
        return ok(rows, count=len(rows))

    @app.route("/api/payslips", methods=["POST"], endpoint="upload_payslip")
    @token_required
    def upload_payslip():
        upload = request.files.get("payslip")
        data = service.upload(
            current_viewer(),
            employee_id=request.form.get("employee_id"),
            month=request.form.get("month"),
            year=request.form.get("year"),
            file_name=upload.filename if upload else None,
            content=upload.read() if upload else None,
            remarks=request.form.get("remarks"),
        )
        return ok(data, message="Payslip uploaded")

    @app.route("/api/payslips/<int:payslip_id>/download", methods=["GET"], endpoint="download_payslip")
    @token_required
    def download_payslip(payslip_id: int):
        path, payslip, as_attachment = service.open_for_download(current_viewer(), payslip_id)
        response = send_file(
            path,
            mimetype="application/pdf",
            as_attachment=as_attachment,
            download_name=payslip.file_name,
        )
        response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, private"
        return response
