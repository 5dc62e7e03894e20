from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http_errors import error_response
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.settings_service

    @app.route("/api/settings/<subdomain>", methods=["GET"], endpoint="get_settings")
    def get_settings(subdomain: str):
        try:
            return jsonify(service.to_dict(service.get(subdomain))), 200
        except Exception as e:
            return error_response(e)

    @app.route("/api/settings/<subdomain>", methods=["PUT"], endpoint="update_settings")
    def update_settings(subdomain: str):
        data = request.get_json(silent=True) or {}
        try:
            settings = service.update_default_end_of_shift(subdomain, data.get("defaultEndOfShift"))
        except Exception as e:
            return error_response(e)
        return jsonify(service.to_dict(settings)), 200
