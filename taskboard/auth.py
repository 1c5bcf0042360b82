"""
Registration, login and access tokens.

Passwords are stored as bcrypt hashes and never leave the store. Tokens are
short HS256 JWTs carrying the user id in `sub`.
"""
import logging
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from taskboard import config
from taskboard.errors import AuthenticationError, InvalidIdentifier, ValidationError
from taskboard.storage import UserStore

logger = logging.getLogger(__name__)

# bcrypt ignores (newer releases reject) anything past 72 bytes
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=config.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode(), salt).decode()


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode(), hashed.encode())
    except (AttributeError, ValueError):
        return False


def create_access_token(user_id: str) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES),
        "type": "access",
    }
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> str:
    """Return the user id in the token or raise AuthenticationError."""
    try:
        payload = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Not authorized, token failed")
    if payload.get("type") != "access" or not payload.get("sub"):
        raise AuthenticationError("Not authorized, token failed")
    return payload["sub"]


def authenticate(store: UserStore, token: str) -> str:
    user_id = decode_access_token(token)
    try:
        user = store.get(user_id)
    except InvalidIdentifier:
        user = None
    if user is None:
        raise AuthenticationError("Not authorized, user not found")
    return user["id"]


def register(store: UserStore, name: str, email: str, password: str):
    if not name or not email or not password:
        raise ValidationError("Please provide name, email and password")
    if len(password.encode()) > MAX_PASSWORD_BYTES:
        raise ValidationError("Password must be at most 72 bytes")
    user = store.insert(name=name, email=email, password=hash_password(password))
    logger.info("registered user %s", user["id"])
    return user, create_access_token(user["id"])


def login(store: UserStore, email: str, password: str):
    if not email or not password:
        raise ValidationError("Please provide email and password")
    user = store.find_by_email(email)
    if user is None or not verify_password(password, user["password"]):
        logger.info("failed login for %s", email)
        raise AuthenticationError("Invalid email or password")
    logger.info("user %s logged in", user["id"])
    return user, create_access_token(user["id"])
