import argparse
import logging
from decimal import Decimal

from sqlalchemy import delete, select

from stockcare.core.logging import setup_logging
from stockcare.database import engine, init_db, session_scope
from stockcare.models.movement import MovementKind, StockMovement
from stockcare.models.product import Product
from stockcare.services.catalog_service import create_product
from stockcare.services.movement_service import post_movement

logger = logging.getLogger("stockcare.seed")

SAMPLE_PRODUCTS = [
    {
        "name": "Cordless Drill",
        "category": "Tools",
        "description": "18V drill with two batteries.",
        "purchase_price": Decimal("55.00"),
        "sale_price": Decimal("89.90"),
        "minimum_stock": 5,
    },
    {
        "name": "Safety Gloves",
        "category": "Protection",
        "purchase_price": Decimal("2.40"),
        "sale_price": Decimal("4.99"),
        "minimum_stock": 40,
    },
    {
        "name": "Measuring Tape 5m",
        "category": "Tools",
        "purchase_price": Decimal("6.10"),
        "sale_price": Decimal("5.50"),
        "minimum_stock": 10,
    },
]

SAMPLE_MOVEMENTS = [
    ("Cordless Drill", MovementKind.PURCHASE, 12, "Opening order"),
    ("Cordless Drill", MovementKind.SALE, 4, None),
    ("Safety Gloves", MovementKind.PURCHASE, 60, "Opening order"),
    ("Safety Gloves", MovementKind.SALE, 35, "Site contract"),
    ("Measuring Tape 5m", MovementKind.PURCHASE, 8, None),
    ("Measuring Tape 5m", MovementKind.SALE, 3, "Clearance price"),
]


def parse_args():
    parser = argparse.ArgumentParser(description="Seed sample catalog and movements.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Clear existing data before seeding.",
    )
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()

    init_db(engine)

    with session_scope() as db:
        if args.reset:
            db.execute(delete(StockMovement))
            db.execute(delete(Product))
            db.commit()

        has_product = db.execute(select(Product.id).limit(1)).first()
        if has_product:
            logger.info("Seed skipped: products already exist.")
            return

        products = {}
        for data in SAMPLE_PRODUCTS:
            product = create_product(db, data)
            products[product.name] = product

        # Stock only moves through the ledger so seeded data reconciles.
        for name, kind, quantity, notes in SAMPLE_MOVEMENTS:
            post_movement(db, products[name].id, kind, quantity, notes=notes)

        logger.info(
            "Seed data created: %s products, %s movements.",
            len(products),
            len(SAMPLE_MOVEMENTS),
        )


if __name__ == "__main__":
    main()
