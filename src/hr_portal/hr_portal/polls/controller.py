from __future__ import annotations

from flask import Flask

from ..auth.context import current_viewer, token_required
from ..common.http import json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.poll_service

    @app.route("/api/polls", methods=["GET"], endpoint="list_polls")
    @token_required
    def list_polls():
        rows = service.list_for_viewer(current_viewer())
        return ok(rows, count=len(rows))

    @app.route("/api/polls/<int:poll_id>", methods=["GET"], endpoint="get_poll")
    @token_required
    def get_poll(poll_id: int):
        return ok(service.get_for_viewer(current_viewer(), poll_id))

    @app.route("/api/polls", methods=["POST"], endpoint="create_poll")
    @token_required
    def create_poll():
        return ok(service.create(current_viewer(), json_body()), status=201)

    @app.route("/api/polls/<int:poll_id>", methods=["PUT"], endpoint="update_poll")
    @token_required
    def update_poll(poll_id: int):
        return ok(service.update(current_viewer(), poll_id, json_body()))

    @app.route("/api/polls/<int:poll_id>", methods=["DELETE"], endpoint="delete_poll")
    @token_required
    def delete_poll(poll_id: int):
        service.delete(current_viewer(), poll_id)
        return ok(message="Poll deleted successfully")

    @app.route("/api/polls/<int:poll_id>/vote", methods=["POST"], endpoint="vote_poll")
    @token_required
    def vote_poll(poll_id: int):
        return ok(service.vote(current_viewer(), poll_id, json_body()))
