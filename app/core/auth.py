"""
Bearer-token authentication.

Tokens are HS256 JWTs issued by the hosted auth provider; `sub` is the user id
and `email` is carried as a claim. Signing out revokes the token for the life
of the process.
"""
import os
import logging
from typing import Optional, Set

from fastapi import Header, HTTPException
from jose import jwt, JWTError

from app.core.context import AuthenticatedUser

logger = logging.getLogger(__name__)

SECRET_KEY = os.getenv("JWT_SECRET")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

if not SECRET_KEY:
    raise RuntimeError("JWT_SECRET environment variable is not set!")


class Authenticator:
    def __init__(self, secret_key: str, algorithm: str = "HS256"):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self._revoked: Set[str] = set()

    def current_user(self, token: str) -> Optional[AuthenticatedUser]:
        if token in self._revoked:
            logger.info("Rejected revoked token")
            return None
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"verify_aud": False},
            )
        except JWTError as e:
            logger.warning(f"⚠️ JWT decode failed: {str(e)}")
            return None

        user_id = payload.get("sub")
        if not user_id:
            logger.warning("⚠️ JWT missing 'sub' claim.")
            return None
        return AuthenticatedUser(id=str(user_id), email=payload.get("email"))

    def sign_out(self, token: str):
        self._revoked.add(token)


authenticator = Authenticator(SECRET_KEY, ALGORITHM)


def bearer_token(authorization: str = Header(...)) -> str:
    if not authorization.startswith("Bearer "):
        logger.warning("⚠️ Missing 'Bearer' in token header.")
        raise HTTPException(status_code=401, detail="Invalid token format")
    return authorization.split(" ", 1)[1]


def get_current_user(authorization: str = Header(...)) -> AuthenticatedUser:
    user = authenticator.current_user(bearer_token(authorization))
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return user
