import uuid
from typing import Optional, Union

from fastapi import Depends, Request
from fastapi_users import BaseUserManager, FastAPIUsers, InvalidPasswordException, UUIDIDMixin
from fastapi_users.authentication import AuthenticationBackend, BearerTransport, JWTStrategy
from fastapi_users.db import SQLAlchemyUserDatabase

from core.config import settings
from core.logging import get_logger
from db.users import User, get_user_db
from schemas.users import UserCreate

log = get_logger("auth")

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 16
PASSWORD_SPECIAL_CHARACTERS = set("!@#$%^&*()-_=+[]{}|\\:;\"'<>,.?/")


def is_long_enough(password: str) -> bool:
    return len(password) >= PASSWORD_MIN_LENGTH


def is_short_enough(password: str) -> bool:
    return len(password) <= PASSWORD_MAX_LENGTH


def password_problem(password: str) -> Optional[str]:
    """Return the first rule ``password`` breaks, or None if it is acceptable."""
    if not password:
        return "Missing password"
    if not is_long_enough(password):
        return f"Password needs at least {PASSWORD_MIN_LENGTH} characters"
    if not is_short_enough(password):
        return f"Password cannot have more than {PASSWORD_MAX_LENGTH} characters"
    if not any("0" <= ch <= "9" for ch in password):
        return "Password requires at least a number"
    if not any("a" <= ch <= "z" for ch in password):
        return "Password requires at least a lowercase character"
    if not any("A" <= ch <= "Z" for ch in password):
        return "Password requires at least an uppercase character"
    if not any(ch in PASSWORD_SPECIAL_CHARACTERS for ch in password):
        return "Password requires at least a special character"
    return None


class UserManager(UUIDIDMixin, BaseUserManager[User, uuid.UUID]):
    reset_password_token_secret = settings.auth_secret
    verification_token_secret = settings.auth_secret

    async def validate_password(self, password: str, user: Union[UserCreate, User]) -> None:
        problem = password_problem(password)
        if problem:
            raise InvalidPasswordException(reason=problem)

    async def on_after_register(self, user: User, request: Optional[Request] = None):
        log.info("User %s has registered", user.id)


async def get_user_manager(user_db: SQLAlchemyUserDatabase = Depends(get_user_db)):
    yield UserManager(user_db)


bearer_transport = BearerTransport(tokenUrl="auth/jwt/login")


def get_jwt_strategy() -> JWTStrategy:
    return JWTStrategy(secret=settings.auth_secret, lifetime_seconds=settings.access_token_lifetime_seconds)


auth_backend = AuthenticationBackend(
    name="jwt",
    transport=bearer_transport,
    get_strategy=get_jwt_strategy,
)

fastapi_users = FastAPIUsers[User, uuid.UUID](get_user_manager, [auth_backend])

current_active_user = fastapi_users.current_user(active=True)
