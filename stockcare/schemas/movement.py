from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from stockcare.models.movement import MovementKind


class MovementCreate(BaseModel):
    product_id: int
    kind: MovementKind
    quantity: int
    timestamp: Optional[datetime] = None
    notes: Optional[str] = None


class MovementRead(BaseModel):
    id: int
    product_id: int
    product_name: Optional[str] = None
    kind: MovementKind
    quantity: int
    timestamp: datetime
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
