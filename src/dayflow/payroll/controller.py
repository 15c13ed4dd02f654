from __future__ import annotations

from typing import Optional

from flask import Flask, jsonify, session

from ..common.web import error_response, internal_error, json_body, login_required, to_json
from ..core.exceptions import DomainError
from ..container import Container
from .model import PayrollRecord


def register(app: Flask, container: Container) -> None:
    svc = container.payroll_service

    def _payload(record: Optional[PayrollRecord]) -> dict:
        if record is None:
            return {"payroll": None, "message": "No payroll configured"}
        return {"payroll": to_json(record), "summary": to_json(svc.summarize(record))}

    @app.route("/payroll", methods=["GET"], endpoint="my_payroll")
    @login_required
    def my_payroll():
        try:
            ctx = container.identity_resolver.resolve(session.get("user_id"))
            return jsonify(_payload(svc.view(ctx, target_user_id=ctx.user_id)))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("Failed to load payroll")

    @app.route("/payroll/<int:user_id>", methods=["GET"], endpoint="view_payroll")
    @login_required
    def view_payroll(user_id: int):
        try:
            ctx = container.identity_resolver.resolve(session.get("user_id"))
            return jsonify(_payload(svc.view(ctx, target_user_id=user_id)))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("Failed to load payroll")

    @app.route("/payroll/<int:user_id>", methods=["PUT"], endpoint="save_payroll")
    @login_required
    def save_payroll(user_id: int):
        try:
            ctx = container.identity_resolver.resolve(session.get("user_id"))
            record = svc.upsert(ctx, target_user_id=user_id, components=json_body())
            return jsonify(_payload(record))
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("Failed to save payroll")
