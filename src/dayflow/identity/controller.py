from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, jsonify, session

from ..common.web import error_response, internal_error, json_body, login_required, to_json
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.exceptions import DomainError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _start_session(profile, remember: bool) -> None:
        session.clear()
        session.permanent = bool(remember)
        app.permanent_session_lifetime = timedelta(days=int(app.config.get("SESSION_DAYS", DEFAULT_SESSION_DAYS)))
        session["user_id"] = profile.id
        session["role"] = profile.role.value

    @app.route("/auth/signup", methods=["POST"], endpoint="signup")
    def signup():
        data = json_body()
        try:
            profile = container.auth_service.sign_up(
                email=data.get("email", ""),
                password=data.get("password", ""),
                employee_id=data.get("employee_id", ""),
                first_name=data.get("first_name", ""),
                last_name=data.get("last_name", ""),
                role=data.get("role", "employee"),
            )
            _start_session(profile, remember=False)
            return jsonify({"profile": to_json(profile)}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("Unexpected error while creating the account")

    @app.route("/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        try:
            profile = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
            _start_session(profile, remember=bool(data.get("remember_me")))
            return jsonify({"profile": to_json(profile)})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("Unexpected error while signing in")

    @app.route("/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"ok": True})

    @app.route("/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        try:
            ctx = container.identity_resolver.resolve(session.get("user_id"))
            return jsonify({"profile": to_json(ctx.profile), "is_admin": ctx.is_admin})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("Unexpected error while loading the profile")

    @app.route("/profiles", methods=["GET"], endpoint="list_profiles")
    @login_required
    def list_profiles():
        try:
            ctx = container.identity_resolver.resolve(session.get("user_id"))
            profiles = container.profile_service.list_profiles(ctx)
            return jsonify({"profiles": to_json(profiles)})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("Unexpected error while loading employees")

    @app.route("/profiles/<int:profile_id>", methods=["GET"], endpoint="get_profile")
    @login_required
    def get_profile(profile_id: int):
        try:
            ctx = container.identity_resolver.resolve(session.get("user_id"))
            profile = container.profile_service.get_profile(ctx, profile_id)
            return jsonify({"profile": to_json(profile)})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("Unexpected error while loading the profile")

    @app.route("/profiles/<int:profile_id>", methods=["PATCH"], endpoint="update_profile")
    @login_required
    def update_profile(profile_id: int):
        try:
            ctx = container.identity_resolver.resolve(session.get("user_id"))
            profile = container.profile_service.update_profile(ctx, profile_id, json_body())
            return jsonify({"profile": to_json(profile)})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("Unexpected error while updating the profile")
