"""Category database model."""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from motoshop.models.database import Base


class Category(Base):
    """A node in the category forest.

    Parent links are plain ids with no ``relationship()`` between categories;
    every traversal goes through an explicit store lookup.
    """

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String, nullable=True)
    # No foreign key: the hierarchy service owns referential integrity
    parent_id = Column(Integer, nullable=True, index=True)
    active = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=True)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self):
        return f"<Category(id={self.id}, name='{self.name}', parent_id={self.parent_id})>"
