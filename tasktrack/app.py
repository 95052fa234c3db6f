import logging

from flask import Flask, jsonify
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from werkzeug.middleware.proxy_fix import ProxyFix

from tasktrack.errors import AuthenticationError, register_error_handlers
from tasktrack.repositories.token_repository import TokenRepository
from tasktrack.repositories.user_repository import UserRepository
from tasktrack.utils.db import get_db, init_app as init_db, ping
from tasktrack.utils.rate_limit import RateLimiter


def create_app(config_object="tasktrack.config.Config", mongo_client=None, **overrides):
    """Application factory.

    ``mongo_client`` lets tests inject a ``mongomock.MongoClient``;
    ``overrides`` are applied on top of ``config_object``.
    """
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.config.update(overrides)

    configure_logging(app)

    if app.config.get("PROXY_FIX_X_FOR"):
        # client_ip() then sees the real client behind the proxy
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=app.config["PROXY_FIX_X_FOR"])

    # Core extensions
    CORS(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}})
    jwt = JWTManager(app)
    configure_jwt(jwt)

    init_db(app, mongo_client)
    app.extensions["rate_limiter"] = RateLimiter()

    # Register blueprints
    from tasktrack.routes.auth_routes import auth_bp
    from tasktrack.routes.task_routes import tasks_bp

    app.register_blueprint(auth_bp, url_prefix="/api")
    app.register_blueprint(tasks_bp, url_prefix="/api/tasks")

    register_error_handlers(app)

    @app.get("/api/health")
    def health():
        database = "ok" if ping(get_db()) else "unavailable"
        return jsonify(status="ok", service="tasktrack API", database=database), 200

    return app


def configure_logging(app):
    level = getattr(logging, app.config.get("LOG_LEVEL", "INFO"), logging.INFO)
    app.logger.setLevel(level)
    # services log under the package namespace
    logging.getLogger("tasktrack").setLevel(level)


def configure_jwt(jwt: JWTManager):
    """Resolve bearer tokens to users and answer every auth failure with a 401."""

    def unauthenticated(*_args):
        exc = AuthenticationError()
        return jsonify(exc.to_dict()), exc.status_code

    jwt.unauthorized_loader(unauthenticated)
    jwt.invalid_token_loader(unauthenticated)
    jwt.expired_token_loader(unauthenticated)
    jwt.revoked_token_loader(unauthenticated)
    jwt.user_lookup_error_loader(unauthenticated)

    @jwt.token_in_blocklist_loader
    def token_revoked(_jwt_header, jwt_payload):
        return not TokenRepository(get_db()).is_active(jwt_payload["jti"])

    @jwt.user_lookup_loader
    def load_user(_jwt_header, jwt_payload):
        return UserRepository(get_db()).find_by_id(jwt_payload["sub"])
