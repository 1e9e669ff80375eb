"""Repository pattern base class for database operations.

Provides common CRUD operations and transaction management utilities
to reduce boilerplate in API endpoints and service layers.
"""

from sqlalchemy.orm import Session
from typing import TypeVar, Generic, Type, Optional, Any, Dict
from database.models import Base
from core.exceptions import NotFoundError

T = TypeVar('T', bound=Base)


class BaseRepository(Generic[T]):
    """Generic repository for common database operations.

    Attributes:
        model: SQLAlchemy model class to operate on.
        session: Database session for executing queries.
        resource: Human readable name used in not-found errors.
    """

    def __init__(self, model: Type[T], session: Session, resource: Optional[str] = None):
        """Initialize repository with model and session.

        Args:
            model: SQLAlchemy model class.
            session: Database session.
            resource: Name reported by `NotFoundError` (defaults to the
                model class name).
        """
        self.model = model
        self.session = session
        self.resource = resource or model.__name__

    def get_by_id(self, id: Any) -> Optional[T]:
        """Retrieve an object by its primary key, or None."""
        return self.session.get(self.model, id)

    def get_or_404(self, id: Any) -> T:
        """Retrieve an object by primary key.

        Raises:
            NotFoundError: If no row has that key.
        """
        obj = self.get_by_id(id)
        if obj is None:
            raise NotFoundError(self.resource, id)
        return obj

    def update(self, obj: T, changes: Dict[str, Any]) -> T:
        """Apply `changes` to `obj`, commit and refresh.

        Keys that are not mapped attributes of the model are ignored.
        """
        for key, value in changes.items():
            if hasattr(self.model, key):
                setattr(obj, key, value)
        self.session.commit()
        self.session.refresh(obj)
        return obj

    def delete(self, obj: T) -> None:
        """Delete an object and commit."""
        self.session.delete(obj)
        self.session.commit()


def save(session: Session, obj: Base) -> Base:
    """Convenience function to add, commit and refresh an object.

    Args:
        session: Database session.
        obj: Model instance to persist.

    Returns:
        The persisted object with refreshed attributes.
    """
    session.add(obj)
    session.commit()
    session.refresh(obj)
    return obj
