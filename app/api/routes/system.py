from fastapi import APIRouter, Depends

from app.api.deps import get_controller
from app.core.controller import BoardController
from app.schemas.system import SystemStats

router = APIRouter(prefix="/api/system", tags=["system"])


@router.get("/stats", response_model=SystemStats)
async def get_stats(controller: BoardController = Depends(get_controller)):
    """Return counts for the signed-in user's board."""
    store = controller.ctx.store
    cards = store.cards()
    suggestions = store.recent_suggestions(limit=None)
    return {
        "columns": len(store.columns()),
        "cards": len(cards),
        "clusters": len({c.cluster_id for c in cards if c.cluster_id is not None}),
        "suggestions": len(suggestions),
        "accepted_suggestions": sum(1 for s in suggestions if s.is_accepted),
        "has_summary": store.latest_summary() is not None,
    }
