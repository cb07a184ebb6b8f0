from __future__ import annotations

from flask import Flask

from ..common.http import json_body, ok
from ..container import Container
from ..employees.model import employee_to_dict
from .context import current_viewer, token_required
from .service import viewer_for


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        body = json_body()
        identifier = body.get("email") or body.get("employee_code") or body.get("identifier") or ""
        token, employee = container.auth_service.login(identifier, body.get("password") or "")
        sensitive = container.employee_service.can_view_sensitive_data(viewer_for(employee))
        return ok(
            {"token": token, "employee": employee_to_dict(employee, include_sensitive=sensitive)},
            canViewSensitiveData=sensitive,
        )

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @token_required
    def me():
        viewer = current_viewer()
        data, sensitive = container.employee_service.get_for_viewer(viewer, viewer.employee_id)
        return ok(data, canViewSensitiveData=sensitive)
