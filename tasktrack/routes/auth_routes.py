from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import current_user, get_jwt, jwt_required

from tasktrack.repositories.token_repository import TokenRepository
from tasktrack.repositories.user_repository import UserRepository
from tasktrack.schemas import parse_payload
from tasktrack.schemas.auth_schemas import LoginRequest, RegisterRequest
from tasktrack.services.auth_service import AuthService
from tasktrack.utils.db import get_db
from tasktrack.utils.rate_limit import rate_limited, user_or_ip

auth_bp = Blueprint("auth", __name__)


def get_auth_service() -> AuthService:
    db = get_db()
    return AuthService(
        UserRepository(db),
        TokenRepository(db),
        hash_method=current_app.config["PASSWORD_HASH_METHOD"],
    )


@auth_bp.post("/register")
@rate_limited("register")
def register():
    data = parse_payload(RegisterRequest, request.get_json(silent=True))
    user, token = get_auth_service().register(data)
    return jsonify(user=user.to_dict(), token=token), 201


@auth_bp.post("/login")
@rate_limited("login")
def login():
    data = parse_payload(LoginRequest, request.get_json(silent=True))
    user, token = get_auth_service().login(data)
    return jsonify(user=user.to_dict(), token=token), 200


@auth_bp.post("/logout")
@jwt_required()
def logout():
    # only the token used for this request; the user's other tokens stay valid
    get_auth_service().logout(get_jwt()["jti"])
    return jsonify(message="Logged out successfully"), 200


@auth_bp.get("/user")
@jwt_required()
@rate_limited("api", key_func=user_or_ip)
def me():
    return jsonify(current_user.to_dict(include_timestamps=True)), 200
