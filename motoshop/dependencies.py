"""FastAPI dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from motoshop.models.database import get_db
from motoshop.repositories import SqlCategoryStore, SqlProductCountProvider
from motoshop.services.category_service import CategoryService
from motoshop.utils.auth import get_current_user

# Type aliases for common dependencies
DbSession = Annotated[Session, Depends(get_db)]
CurrentUser = Annotated[str, Depends(get_current_user)]


def get_category_service(db: DbSession) -> CategoryService:
    """Build a hierarchy service bound to the request's session."""
    return CategoryService(SqlCategoryStore(db), SqlProductCountProvider(db))


CategoryServiceDep = Annotated[CategoryService, Depends(get_category_service)]
