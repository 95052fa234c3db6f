import os
from datetime import timedelta

from dotenv import load_dotenv

# Load .env from project root so local development MONGO_URI is picked up
load_dotenv()


def _env_flag(name, default):
    return os.environ.get(name, default).lower() in ("1", "true", "yes", "on")


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", "change-this-jwt-secret")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.environ.get("JWT_EXPIRES_HOURS", "12")))

    MONGO_URI = os.environ.get("MONGO_URI", "mongodb://localhost:27017/?directConnection=true")
    MONGO_DB_NAME = os.environ.get("MONGO_DB_NAME", "tasktrack")

    MONGO_CREATE_INDEXES = _env_flag("MONGO_CREATE_INDEXES", "1")

    DEBUG = os.environ.get("FLASK_DEBUG", "1") == "1"
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")
    # Number of trusted reverse proxies in front of the app (X-Forwarded-For hops).
    PROXY_FIX_X_FOR = int(os.environ.get("PROXY_FIX_X_FOR", "0"))
    PASSWORD_HASH_METHOD = os.environ.get("PASSWORD_HASH_METHOD", "scrypt")

    # Requests per minute. Login and register are keyed by client IP, the
    # authenticated API by user id.
    RATELIMIT_ENABLED = _env_flag("RATELIMIT_ENABLED", "1")
    RATELIMIT_LOGIN = int(os.environ.get("RATELIMIT_LOGIN", "5"))
    RATELIMIT_REGISTER = int(os.environ.get("RATELIMIT_REGISTER", "3"))
    RATELIMIT_API = int(os.environ.get("RATELIMIT_API", "60"))


class TestingConfig(Config):
    TESTING = True
    DEBUG = False
    MONGO_DB_NAME = "tasktrack_test"
    JWT_SECRET_KEY = "testing-jwt-secret-with-enough-length-for-hs256"
    # cheap hashing keeps the suite fast
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    LOG_LEVEL = "WARNING"
