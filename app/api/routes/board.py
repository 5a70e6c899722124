import logging

from fastapi import APIRouter, Depends

from app.api.deps import get_controller, to_response
from app.core.controller import BoardController
from app.schemas.board import BoardRead, OperationResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/board", tags=["board"])


@router.get("/", response_model=BoardRead)
async def get_board(controller: BoardController = Depends(get_controller)):
    """Return the signed-in user's board, loading it on first access."""
    store = controller.ctx.store
    return {
        "user_id": controller.ctx.user.id,
        "email": controller.ctx.user.email,
        "loading": controller.loading,
        "is_processing": controller.is_processing,
        "columns": store.columns(),
        "cards": store.cards(),
        "suggestions": store.recent_suggestions(),
        "summary": store.latest_summary(),
    }


@router.post("/reload", response_model=OperationResponse)
async def reload_board(controller: BoardController = Depends(get_controller)):
    """Discard the local copy and fetch the board again."""
    return to_response(await controller.load())


@router.post("/cluster", response_model=OperationResponse)
async def cluster_board(controller: BoardController = Depends(get_controller)):
    """Group a sample of cards under a shared cluster id."""
    result = await controller.cluster()
    logger.info(f"Cluster request finished with status {result.status.value}")
    return to_response(result)


@router.post("/summarize", response_model=OperationResponse)
async def summarize_board(controller: BoardController = Depends(get_controller)):
    return to_response(await controller.summarize())
