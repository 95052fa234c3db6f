import logging
from typing import Callable, Tuple

from flask_jwt_extended import create_access_token, get_jti
from pymongo.errors import DuplicateKeyError
from werkzeug.security import check_password_hash, generate_password_hash

from tasktrack.errors import CredentialsError, ValidationError
from tasktrack.models.user_model import User
from tasktrack.repositories.token_repository import TokenRepository
from tasktrack.repositories.user_repository import UserRepository
from tasktrack.schemas.auth_schemas import LoginRequest, RegisterRequest
from tasktrack.utils.clock import utcnow

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "The email has already been taken."


class AuthService:
    """Registration, login and per-token logout.

    Must be used inside a Flask app context: tokens are minted with
    flask-jwt-extended.
    """

    def __init__(
        self,
        users: UserRepository,
        tokens: TokenRepository,
        hash_method: str = "scrypt",
        clock: Callable = utcnow,
    ):
        self.users = users
        self.tokens = tokens
        self.hash_method = hash_method
        self.clock = clock

    def register(self, data: RegisterRequest) -> Tuple[User, str]:
        if self.users.find_by_email(data.email) is not None:
            raise ValidationError({"email": [EMAIL_TAKEN]})

        now = self.clock()
        user = User(
            name=data.name,
            email=data.email,
            password_hash=generate_password_hash(data.password, method=self.hash_method),
            created_at=now,
            updated_at=now,
        )
        try:
            user = self.users.insert(user)
        except DuplicateKeyError:
            # lost a race with a concurrent registration
            raise ValidationError({"email": [EMAIL_TAKEN]}) from None

        logger.info("Registered user %s", user.id)
        return user, self.issue_token(user)

    def login(self, data: LoginRequest) -> Tuple[User, str]:
        user = self.users.find_by_email(data.email)
        if user is None or not check_password_hash(user.password_hash, data.password):
            logger.warning("Failed login attempt for %s", data.email)
            raise CredentialsError()
        return user, self.issue_token(user)

    def issue_token(self, user: User) -> str:
        token = create_access_token(identity=user.id)
        self.tokens.add(get_jti(token), user.id, self.clock())
        logger.info("Issued access token for user %s", user.id)
        return token

    def logout(self, jti: str) -> None:
        """Revoke the single token identified by ``jti``."""
        if self.tokens.revoke(jti):
            logger.info("Revoked access token %s", jti)
