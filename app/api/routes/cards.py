from fastapi import APIRouter, Depends

from app.api.deps import get_controller, to_response
from app.core.controller import BoardController
from app.schemas.board import OperationResponse
from app.schemas.card import CardCreate, CardMove, CardUpdate

router = APIRouter(prefix="/api/cards", tags=["cards"])


@router.post("/", response_model=OperationResponse)
async def add_card(
    card: CardCreate,
    controller: BoardController = Depends(get_controller),
):
    """Append a card to a column (the first column when none is given)."""
    result = await controller.add_card(card.column_id, card.title, card.description)
    return to_response(result)


@router.patch("/{card_id}", response_model=OperationResponse)
async def update_card(
    card_id: str,
    data: CardUpdate,
    controller: BoardController = Depends(get_controller),
):
    return to_response(await controller.update_card(card_id, data.title, data.description))


@router.delete("/{card_id}", response_model=OperationResponse)
async def delete_card(
    card_id: str,
    controller: BoardController = Depends(get_controller),
):
    return to_response(await controller.delete_card(card_id))


@router.post("/{card_id}/move", response_model=OperationResponse)
async def move_card(
    card_id: str,
    data: CardMove,
    controller: BoardController = Depends(get_controller),
):
    """Move a card to the end of another column."""
    return to_response(await controller.move_card(card_id, data.column_id))
