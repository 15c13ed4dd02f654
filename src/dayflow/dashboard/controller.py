from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.web import error_response, internal_error, login_required, to_json
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/dashboard", methods=["GET"], endpoint="dashboard")
    @login_required
    def dashboard():
        try:
            ctx = container.identity_resolver.resolve(session.get("user_id"))
            summary = container.dashboard_service.summary(ctx)
            return jsonify({"profile": to_json(ctx.profile), "summary": to_json(summary)})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("Failed to load dashboard")
