import secrets

from passlib.context import CryptContext
from fastapi import HTTPException, Header, status

from accounts.core.config import settings

# Password hashing setup
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_api_key(x_api_key: str = Header(...)):
    if not settings.API_KEY or not secrets.compare_digest(x_api_key, settings.API_KEY):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid API key.")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def generate_api_token(length: int = settings.API_TOKEN_LENGTH) -> str:
    """Random url-safe token of exactly `length` characters."""
    return secrets.token_urlsafe(length)[:length]
