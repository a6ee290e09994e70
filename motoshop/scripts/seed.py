"""Seed data export and import utilities.

Usage:
    # Export current database to seed file
    python -m motoshop.scripts.seed export

    # Load seed data into database
    python -m motoshop.scripts.seed load

    # Load seed data (clear existing first)
    python -m motoshop.scripts.seed load --clear
"""

import json
import sys
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

from motoshop.models.database import SessionLocal, create_tables
from motoshop.models.category import Category
from motoshop.models.product import Product
from motoshop.services.hierarchy import find_hierarchy_violations


SEED_FILE = Path.cwd() / "seed_data.json"


class DecimalEncoder(json.JSONEncoder):
    """JSON encoder that handles Decimal types."""
    def default(self, obj):
        if isinstance(obj, Decimal):
            return float(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        return super().default(obj)


def export_seed_data(output_path: Path = SEED_FILE, session_factory=SessionLocal) -> dict:
    """Export all categories and products to JSON."""
    db = session_factory()

    try:
        categories = []
        for c in db.query(Category).order_by(Category.id).all():
            categories.append({
                "id": c.id,
                "name": c.name,
                "description": c.description,
                "image_url": c.image_url,
                "parent_id": c.parent_id,
                "active": c.active,
                "sort_order": c.sort_order,
            })

        products = []
        for p in db.query(Product).order_by(Product.id).all():
            products.append({
                "id": p.id,
                "name": p.name,
                "description": p.description,
                "price": p.price_float,
                "stock_quantity": p.stock_quantity,
                "available": p.available,
                "image_url": p.image_url,
                "category_id": p.category_id,
            })

        seed_data = {
            "exported_at": datetime.now(timezone.utc).isoformat(),
            "version": "1.0",
            "categories": categories,
            "products": products,
        }

        with open(output_path, "w") as f:
            json.dump(seed_data, f, indent=2, cls=DecimalEncoder)

        print(f"Exported seed data to {output_path}")
        print(f"  Categories: {len(categories)}")
        print(f"  Products: {len(products)}")

        return seed_data

    finally:
        db.close()


def load_seed_data(
    input_path: Path = SEED_FILE,
    clear_existing: bool = False,
    session_factory=SessionLocal,
) -> dict:
    """Load seed data from JSON into database.

    The category hierarchy in the file is checked first; a file with
    dangling parents or cycles is rejected before anything is written.

    Args:
        input_path: Path to seed JSON file
        clear_existing: If True, delete all existing data first

    Returns:
        Dict with counts of loaded items
    """
    if not input_path.exists():
        raise FileNotFoundError(f"Seed file not found: {input_path}")

    with open(input_path) as f:
        seed_data = json.load(f)

    seed_categories = [
        Category(
            id=c_data["id"],
            name=c_data["name"],
            description=c_data.get("description"),
            image_url=c_data.get("image_url"),
            parent_id=c_data.get("parent_id"),
            active=c_data.get("active", True),
            sort_order=c_data.get("sort_order"),
        )
        for c_data in seed_data.get("categories", [])
    ]
    report = find_hierarchy_violations(seed_categories)
    if not report.ok:
        raise ValueError(
            f"Seed categories are corrupt: dangling parents {report.dangling_parent_ids}, "
            f"cycles {report.cyclic_ids}"
        )

    db = session_factory()

    try:
        if clear_existing:
            print("Clearing existing data...")
            db.query(Product).delete()
            db.query(Category).delete()
            db.commit()

        stats = {"categories": 0, "products": 0, "skipped": 0}

        existing_category_ids = {cid for (cid,) in db.query(Category.id).all()}
        for category in seed_categories:
            if category.id in existing_category_ids:
                stats["skipped"] += 1
                continue
            db.add(category)
            stats["categories"] += 1
        db.commit()

        existing_product_ids = {pid for (pid,) in db.query(Product.id).all()}
        for p_data in seed_data.get("products", []):
            if p_data["id"] in existing_product_ids:
                stats["skipped"] += 1
                continue
            db.add(Product(
                id=p_data["id"],
                name=p_data["name"],
                description=p_data.get("description"),
                price=p_data.get("price"),
                stock_quantity=p_data.get("stock_quantity", 0),
                available=p_data.get("available", True),
                image_url=p_data.get("image_url"),
                category_id=p_data.get("category_id"),
            ))
            stats["products"] += 1
        db.commit()

        print(f"Loaded seed data from {input_path}")
        print(f"  Categories: {stats['categories']} new")
        print(f"  Products: {stats['products']} new")
        print(f"  Skipped: {stats['skipped']} (already exist)")

        return stats

    finally:
        db.close()


def main():
    """CLI entry point."""
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    command = sys.argv[1]
    create_tables()

    if command == "export":
        export_seed_data()
    elif command == "load":
        clear = "--clear" in sys.argv
        try:
            load_seed_data(clear_existing=clear)
        except (FileNotFoundError, ValueError) as exc:
            print(f"Error: {exc}")
            sys.exit(1)
    else:
        print(f"Unknown command: {command}")
        print(__doc__)
        sys.exit(1)


if __name__ == "__main__":
    main()
