"""
Base repository implementation providing generic CRUD operations.

Concrete repositories extend this class and declare the SQLModel entity they
manage. The session is either injected or taken from the current context.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, SQLModel, select

from thegame.core.observability import get_logger
from thegame.middleware.db_session import get_db_from_context
from thegame.shared.exceptions import (
    DatabaseError,
    DataIntegrityError,
    EntityNotFoundError,
)

EntityType = TypeVar("EntityType", bound=SQLModel)

logger = get_logger(__name__)


class BaseRepository(Generic[EntityType], ABC):
    """
    Base repository class providing generic CRUD operations.

    Write operations commit on success and roll the session back before
    re-raising on failure.
    """

    def __init__(self, session: Session | None = None):
        """
        Initialize repository with database session.

        Args:
            session: SQLModel session; defaults to the session bound to the
                current context
        """
        self.session = session if session is not None else get_db_from_context()

    @property
    @abstractmethod
    def entity_class(self) -> type[EntityType]:
        """Return the SQLModel entity class managed by this repository."""
        pass

    def get_by_id(self, entity_id: str) -> EntityType | None:
        """
        Get entity by ID.

        Raises:
            DatabaseError: If database operation fails
        """
        try:
            return self.session.get(self.entity_class, entity_id)
        except SQLAlchemyError as e:
            raise DatabaseError(f"Database error during get_by_id: {str(e)}") from e

    def get_by_id_required(self, entity_id: str) -> EntityType:
        """
        Get entity by ID, raising exception if not found.

        Raises:
            EntityNotFoundError: If entity not found
            DatabaseError: If database operation fails
        """
        entity = self.get_by_id(entity_id)
        if entity is None:
            raise EntityNotFoundError(self.entity_class.__name__, entity_id)
        return entity

    def get_all(self) -> list[EntityType]:
        try:
            return list(self.session.exec(select(self.entity_class)).all())
        except SQLAlchemyError as e:
            raise DatabaseError(f"Database error during get_all: {str(e)}") from e

    def count(self) -> int:
        try:
            statement = select(func.count()).select_from(self.entity_class)
            return self.session.exec(statement).one()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Database error during count: {str(e)}") from e

    def save(self, entity: EntityType) -> EntityType:
        """
        Add or update an entity and commit.

        Raises:
            DataIntegrityError: If a constraint is violated
            DatabaseError: If database operation fails
        """
        try:
            self.session.add(entity)
            self.session.commit()
            self.session.refresh(entity)
            return entity
        except IntegrityError as e:
            self.session.rollback()
            raise DataIntegrityError(f"Integrity error during save: {str(e)}") from e
        except SQLAlchemyError as e:
            self.session.rollback()
            raise DatabaseError(f"Database error during save: {str(e)}") from e

    def delete(self, entity_id: str) -> bool:
        """
        Delete an entity by ID.

        Returns:
            True if entity was deleted, False if not found
        """
        entity = self.get_by_id(entity_id)
        if entity is None:
            return False

        try:
            self.session.delete(entity)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise DatabaseError(f"Database error during delete: {str(e)}") from e

        logger.info(
            "Entity deleted", entity=self.entity_class.__name__, entity_id=entity_id
        )
        return True
