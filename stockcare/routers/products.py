from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from stockcare.dependencies import get_db
from stockcare.schemas.movement import MovementRead
from stockcare.schemas.product import (
    ProductCreate,
    ProductPatch,
    ProductRead,
    ProductReadWithMovements,
    ProductReplace,
)
from stockcare.services.catalog_service import (
    create_product,
    delete_product,
    get_product,
    list_products,
    update_product,
)
from stockcare.services.movement_service import list_product_movements

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=list[ProductRead])
def list_all_products(db: Session = Depends(get_db)):
    return [ProductRead.model_validate(product) for product in list_products(db)]


@router.get("/{product_id}", response_model=ProductReadWithMovements)
def get_product_detail(product_id: int, db: Session = Depends(get_db)):
    product = get_product(db, product_id)
    base = ProductRead.model_validate(product).model_dump()
    base["movements"] = [
        MovementRead.model_validate(movement)
        for movement in list_product_movements(db, product_id)
    ]
    return ProductReadWithMovements(**base)


@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
def create_new_product(payload: ProductCreate, db: Session = Depends(get_db)):
    product = create_product(db, payload.model_dump())
    return ProductRead.model_validate(product)


@router.put("/{product_id}", response_model=ProductRead)
def replace_product(product_id: int, payload: ProductReplace, db: Session = Depends(get_db)):
    changes = payload.model_dump(exclude={"version"})
    product = update_product(db, product_id, changes, expected_version=payload.version)
    return ProductRead.model_validate(product)


@router.patch("/{product_id}", response_model=ProductRead)
def patch_product(product_id: int, payload: ProductPatch, db: Session = Depends(get_db)):
    changes = payload.model_dump(exclude_unset=True, exclude={"version"})
    product = update_product(db, product_id, changes, expected_version=payload.version)
    return ProductRead.model_validate(product)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_product(product_id: int, db: Session = Depends(get_db)):
    delete_product(db, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
