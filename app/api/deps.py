from fastapi import Depends, HTTPException, Request

from app.core.auth import get_current_user
from app.core.context import AuthenticatedUser
from app.core.controller import BoardController
from app.core.results import SyncResult, SyncStatus
from app.schemas.board import OperationResponse


async def get_controller(
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
) -> BoardController:
    """The signed-in user's controller, loaded on first use."""
    controller = request.app.state.sessions.controller_for(user)
    result = await controller.ensure_loaded()
    if not result.ok:
        raise HTTPException(status_code=502, detail=f"Board could not be loaded: {result.reason}")
    return controller


def to_response(result: SyncResult) -> OperationResponse:
    """Missing entities become 404 and remote failures 502; other outcomes are reported in the body."""
    if result.status is SyncStatus.NOT_FOUND:
        raise HTTPException(status_code=404, detail=result.reason)
    if result.status is SyncStatus.REMOTE_FAILURE:
        raise HTTPException(status_code=502, detail=result.reason)
    return OperationResponse(status=result.status.value, reason=result.reason, data=result.value)
