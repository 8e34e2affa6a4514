from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from stockcare.schemas.movement import MovementRead


class ProductBase(BaseModel):
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    purchase_price: Decimal
    sale_price: Decimal
    current_stock: int = 0
    minimum_stock: int = 0


class ProductCreate(ProductBase):
    pass


class ProductReplace(ProductBase):
    # A full replacement states every stock level; omitting one must not zero it.
    current_stock: int
    minimum_stock: int
    version: int = Field(..., description="Version read by the client; 409 if stale")


class ProductPatch(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    purchase_price: Optional[Decimal] = None
    sale_price: Optional[Decimal] = None
    current_stock: Optional[int] = None
    minimum_stock: Optional[int] = None
    version: int = Field(..., description="Version read by the client; 409 if stale")


class ProductRead(ProductBase):
    id: int
    version: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProductReadWithMovements(ProductRead):
    movements: List[MovementRead] = Field(default_factory=list)
