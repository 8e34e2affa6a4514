from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from stockcare.dependencies import get_db
from stockcare.schemas.movement import MovementCreate, MovementRead
from stockcare.services.movement_service import get_movement, list_movements, post_movement

router = APIRouter(prefix="/movements", tags=["Movements"])


@router.get("", response_model=list[MovementRead])
def list_all_movements(db: Session = Depends(get_db)):
    return [MovementRead.model_validate(movement) for movement in list_movements(db)]


@router.post("", response_model=MovementRead, status_code=status.HTTP_201_CREATED)
def create_movement(payload: MovementCreate, db: Session = Depends(get_db)):
    movement = post_movement(
        db,
        payload.product_id,
        payload.kind,
        payload.quantity,
        timestamp=payload.timestamp,
        notes=payload.notes,
    )
    return MovementRead.model_validate(movement)


@router.get("/{movement_id}", response_model=MovementRead)
def get_movement_detail(movement_id: int, db: Session = Depends(get_db)):
    return MovementRead.model_validate(get_movement(db, movement_id))


__all__ = ["router"]
