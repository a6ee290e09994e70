"""Default motoshop root categories."""

import logging

from sqlalchemy.orm import Session

from motoshop.models.category import Category

logger = logging.getLogger(__name__)

# (name, sort order)
DEFAULT_CATEGORIES = [
    ("Helmets", 10),
    ("Gloves", 20),
    ("Jackets", 30),
    ("Pants", 40),
    ("Boots", 50),
]


def ensure_default_categories(db: Session) -> list[Category]:
    """Ensure the default root categories exist in the database.

    Categories are matched by name; existing ones are left untouched.

    Args:
        db: Database session

    Returns:
        The categories created by this call
    """
    existing_names = {name for (name,) in db.query(Category.name).all()}
    created = []

    for name, sort_order in DEFAULT_CATEGORIES:
        if name in existing_names:
            logger.debug(f"Category already exists: {name}")
            continue
        category = Category(
            name=name,
            description=f"Product category: {name}",
            active=True,
            sort_order=sort_order,
        )
        db.add(category)
        created.append(category)

    if created:
        db.commit()
    logger.info(
        f"Default categories initialized. Created: {len(created)}, "
        f"existing: {len(DEFAULT_CATEGORIES) - len(created)}"
    )
    return created
