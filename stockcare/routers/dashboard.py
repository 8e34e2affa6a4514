from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from stockcare.config import get_settings
from stockcare.dependencies import get_db
from stockcare.schemas.dashboard import DashboardRead, ProfitabilityRead, TopSoldRead
from stockcare.schemas.product import ProductRead
from stockcare.services.report_service import (
    dashboard_summary,
    low_stock,
    profitability,
    top_sold,
)

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardRead)
def dashboard(
    top: Optional[int] = Query(None, ge=1, le=100, description="Number of top sellers"),
    db: Session = Depends(get_db),
):
    if top is None:
        top = get_settings().DASHBOARD_TOP_SOLD_LIMIT
    return DashboardRead.model_validate(dashboard_summary(db, top_n=top), from_attributes=True)


@router.get("/low-stock", response_model=list[ProductRead])
def low_stock_products(db: Session = Depends(get_db)):
    return [ProductRead.model_validate(product) for product in low_stock(db)]


@router.get("/top-sold", response_model=list[TopSoldRead])
def top_sold_products(
    limit: int = Query(10, ge=1, le=100, description="Max entries to return"),
    db: Session = Depends(get_db),
):
    return [TopSoldRead.model_validate(entry) for entry in top_sold(db, limit)]


@router.get("/profitability", response_model=list[ProfitabilityRead])
def profitability_report(db: Session = Depends(get_db)):
    return [ProfitabilityRead.model_validate(entry) for entry in profitability(db)]


__all__ = ["router"]
