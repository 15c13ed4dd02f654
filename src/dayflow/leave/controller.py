from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.web import error_response, internal_error, json_body, login_required, to_json
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/leave-requests", methods=["GET"], endpoint="list_leave_requests")
    @login_required
    def list_leave_requests():
        try:
            ctx = container.identity_resolver.resolve(session.get("user_id"))
            requests_ = container.leave_service.list_requests(ctx, status=request.args.get("status") or None)
            return jsonify({"leave_requests": to_json(requests_)})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("Failed to load leave requests")

    @app.route("/leave-requests", methods=["POST"], endpoint="submit_leave_request")
    @login_required
    def submit_leave_request():
        data = json_body()
        try:
            ctx = container.identity_resolver.resolve(session.get("user_id"))
            created = container.leave_service.submit(
                ctx,
                leave_type=data.get("leave_type", ""),
                start_date=data.get("start_date"),
                end_date=data.get("end_date"),
                remarks=data.get("remarks"),
            )
            return jsonify({"leave_request": to_json(created)}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("Failed to submit leave request")

    @app.route("/leave-requests/<int:request_id>", methods=["GET"], endpoint="get_leave_request")
    @login_required
    def get_leave_request(request_id: int):
        try:
            ctx = container.identity_resolver.resolve(session.get("user_id"))
            req = container.leave_service.get_request(ctx, request_id)
            return jsonify({"leave_request": to_json(req)})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("Failed to load leave request")

    @app.route("/leave-requests/<int:request_id>/review", methods=["POST"], endpoint="review_leave_request")
    @login_required
    def review_leave_request(request_id: int):
        data = json_body()
        try:
            ctx = container.identity_resolver.resolve(session.get("user_id"))
            reviewed = container.leave_service.review(
                ctx,
                request_id=request_id,
                decision=data.get("decision", ""),
                comment=data.get("comment"),
            )
            return jsonify({"leave_request": to_json(reviewed)})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("Failed to review leave request")
