from typing import List

from fastapi import APIRouter, Depends

from app.api.deps import get_controller, to_response
from app.core.controller import BoardController
from app.schemas.board import OperationResponse
from app.schemas.suggestion import SuggestionRead

router = APIRouter(prefix="/api/suggestions", tags=["suggestions"])


@router.get("/", response_model=List[SuggestionRead])
async def list_suggestions(
    limit: int = 10,
    controller: BoardController = Depends(get_controller),
):
    return controller.ctx.store.recent_suggestions(limit)


@router.post("/{suggestion_id}/accept", response_model=OperationResponse)
async def accept_suggestion(
    suggestion_id: str,
    controller: BoardController = Depends(get_controller),
):
    """Add the suggestion to the board as a new card."""
    return to_response(await controller.accept_suggestion(suggestion_id))
