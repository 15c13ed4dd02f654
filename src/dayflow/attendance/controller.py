from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.web import error_response, internal_error, login_required
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    svc = container.attendance_service

    @app.route("/attendance", methods=["GET"], endpoint="list_attendance")
    @login_required
    def list_attendance():
        try:
            ctx = container.identity_resolver.resolve(session.get("user_id"))
            records = svc.list_records(ctx, range_=request.args.get("range", "week"))
            return jsonify({"records": [svc.to_row(r) for r in records]})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("Failed to load attendance records")

    @app.route("/attendance/today", methods=["GET"], endpoint="today_attendance")
    @login_required
    def today_attendance():
        try:
            ctx = container.identity_resolver.resolve(session.get("user_id"))
            record = svc.get_today(ctx)
            return jsonify({"record": svc.to_row(record) if record else None})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("Failed to load today's attendance")

    @app.route("/attendance/check-in", methods=["POST"], endpoint="checkin")
    @login_required
    def checkin():
        try:
            ctx = container.identity_resolver.resolve(session.get("user_id"))
            record = svc.check_in(ctx)
            return jsonify({"record": svc.to_row(record)}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("Failed to check in")

    @app.route("/attendance/check-out", methods=["POST"], endpoint="checkout")
    @login_required
    def checkout():
        try:
            ctx = container.identity_resolver.resolve(session.get("user_id"))
            record = svc.check_out(ctx)
            return jsonify({"record": svc.to_row(record)})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("Failed to check out")
