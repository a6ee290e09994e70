import os

# Settings are read at import time, so the environment must be ready first
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SEED_DEFAULT_CATEGORIES", "false")
os.environ.setdefault("API_KEY_TESTER", "test-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from motoshop.main import app
from motoshop.models.category import Category
from motoshop.models.database import create_tables, get_db
from motoshop.models.product import Product
from motoshop.repositories import SqlCategoryStore, SqlProductCountProvider
from motoshop.schemas.category import CategoryCreate
from motoshop.services.category_service import CategoryService


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def service(db):
    return CategoryService(
        SqlCategoryStore(db),
        SqlProductCountProvider(db),
        delete_policy="reparent",
        conflict_retries=0,
    )


@pytest.fixture
def make_category(service):
    def make(name, parent=None, **fields):
        parent_id = parent.id if isinstance(parent, Category) else parent
        return service.create_category(CategoryCreate(name=name, parent_id=parent_id, **fields))

    return make


@pytest.fixture
def add_products(db):
    def add(category, count):
        category_id = category.id if isinstance(category, Category) else category
        for i in range(count):
            db.add(Product(name=f"Product {category_id}-{i}", category_id=category_id, price=10))
        db.commit()

    return add


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app, headers={"X-API-Key": "test-key"}) as test_client:
        yield test_client
    app.dependency_overrides.clear()
