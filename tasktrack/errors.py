from typing import Dict, List, Optional

from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException


class ApiError(Exception):
    """Base class for errors that map straight onto a JSON response."""

    status_code = 500
    message = "Server Error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self) -> dict:
        return {"message": self.message}

    def headers(self) -> Dict[str, str]:
        return {}


class ValidationError(ApiError):
    status_code = 422
    message = "The given data was invalid."

    def __init__(self, errors: Dict[str, List[str]], message: Optional[str] = None):
        # Laravel-style summary: first message, plus a count of the rest.
        if message is None and errors:
            messages = [msg for field_msgs in errors.values() for msg in field_msgs]
            message = messages[0]
            if len(messages) > 1:
                extra = len(messages) - 1
                message += f" (and {extra} more error{'s' if extra > 1 else ''})"
        super().__init__(message)
        self.errors = errors

    def to_dict(self) -> dict:
        return {"message": self.message, "errors": self.errors}


class CredentialsError(ValidationError):
    """Login failure. Same message whether the email is unknown or the password is wrong."""

    CREDENTIALS_MESSAGE = "The provided credentials are incorrect."

    def __init__(self):
        super().__init__({"email": [self.CREDENTIALS_MESSAGE]}, self.CREDENTIALS_MESSAGE)


class AuthenticationError(ApiError):
    status_code = 401
    message = "Unauthenticated."


class NotFoundError(ApiError):
    status_code = 404
    message = "Task not found."


class RateLimitError(ApiError):
    status_code = 429
    message = "Too Many Attempts."

    def __init__(self, limit: int, retry_after: int):
        super().__init__()
        self.limit = limit
        self.retry_after = retry_after

    def headers(self) -> Dict[str, str]:
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": "0",
            "Retry-After": str(self.retry_after),
        }


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(exc):
        response = jsonify(exc.to_dict())
        response.status_code = exc.status_code
        for name, value in exc.headers().items():
            response.headers[name] = value
        return response

    @app.errorhandler(HTTPException)
    def handle_http_exception(exc):
        return jsonify(message=exc.description or exc.name), exc.code

    @app.errorhandler(404)
    def not_found(_):
        return jsonify(message="Not Found"), 404

    @app.errorhandler(500)
    def server_error(_):
        return jsonify(message="Internal Server Error"), 500

    @app.errorhandler(Exception)
    def unhandled(exc):
        current_app.logger.exception("Unhandled error: %s", exc)
        return jsonify(message="Internal Server Error"), 500
