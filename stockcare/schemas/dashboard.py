from decimal import Decimal
from typing import List

from pydantic import BaseModel, ConfigDict

from stockcare.schemas.product import ProductRead


class TopSoldRead(BaseModel):
    product_id: int
    name: str
    quantity: int

    model_config = ConfigDict(from_attributes=True)


class ProfitabilityRead(BaseModel):
    product_id: int
    name: str
    sold_quantity: int
    profit_per_unit: Decimal
    total_profit: Decimal

    model_config = ConfigDict(from_attributes=True)


class DashboardRead(BaseModel):
    total_products: int
    low_stock_count: int
    low_stock_products: List[ProductRead]
    top_sold: List[TopSoldRead]
    profitability: List[ProfitabilityRead]
