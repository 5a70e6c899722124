import logging

from fastapi import APIRouter, Depends, Header, Request

from app.core.auth import authenticator, bearer_token, get_current_user
from app.core.context import AuthenticatedUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.get("/me", response_model=AuthenticatedUser)
async def current_user(user: AuthenticatedUser = Depends(get_current_user)):
    return user


@router.post("/sign-out")
async def sign_out(
    request: Request,
    authorization: str = Header(...),
    user: AuthenticatedUser = Depends(get_current_user),
):
    """Revoke the token and drop the user's board session."""
    authenticator.sign_out(bearer_token(authorization))
    request.app.state.sessions.close(user.id)
    logger.info(f"User {user.id} signed out")
    return {"message": "Signed out"}
