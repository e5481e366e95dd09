"""
Repository for the User entity and its game state.
"""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.attributes import flag_modified
from sqlmodel import select
from sqlmodel.sql.expression import SelectOfScalar

from thegame.core.observability import get_logger
from thegame.models import (
    NewUser,
    User,
    UserGameState,
    UserGameStateUpdate,
    encode_friends,
)
from thegame.shared.exceptions import (
    DatabaseError,
    EntityNotFoundError,
    ValidationError,
)

from .base import BaseRepository

logger = get_logger(__name__)

WRITTEN_GAME_STATE_FIELDS = ("games_played", "score", "user_id")


def game_state_for_user_query(user_id: str) -> SelectOfScalar[UserGameState]:
    """First game state owned by ``user_id``, ordered by primary key."""
    return (
        select(UserGameState)
        .where(UserGameState.user_id == user_id)
        .order_by(UserGameState.id)
        .limit(1)
    )


class UserRepository(BaseRepository[User]):
    """Repository for managing users and their game state."""

    @property
    def entity_class(self) -> type[User]:
        return User

    def create(self, new_user: NewUser) -> User:
        """Insert a user together with an empty game state."""
        user = User(
            name=new_user.name,
            friends=encode_friends(None),
            game_state=UserGameState(),
        )
        user = self.save(user)
        logger.info("User created", user_id=user.id, name=user.name)
        return user

    def get_all(self) -> list[User]:
        """Every user, with the game state eagerly loaded."""
        try:
            statement = select(User).options(selectinload(User.game_state))
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            raise DatabaseError(f"Database error during get_all: {str(e)}") from e

    def get_by_id(self, entity_id: str) -> User | None:
        try:
            statement = (
                select(User)
                .where(User.id == entity_id)
                .options(selectinload(User.game_state))
            )
            return self.session.exec(statement).first()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Database error during get_by_id: {str(e)}") from e

    def update_game_state(self, update: UserGameStateUpdate) -> UserGameState:
        """
        Apply counters to the game state owned by ``update.user_id``.

        Supplied counters are written together with the unchanged columns,
        so the row ends up as this call saw it.

        Raises:
            EntityNotFoundError: If the user has no game state
            DatabaseError: If database operation fails
        """
        try:
            state = self.session.exec(game_state_for_user_query(update.user_id)).first()
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Database error during update_game_state: {str(e)}"
            ) from e
        if state is None:
            raise EntityNotFoundError(UserGameState.__name__, update.user_id)

        changes = update.model_dump(
            exclude={"user_id"}, exclude_unset=True, exclude_none=True
        )
        if not changes:
            return state

        for field, value in changes.items():
            setattr(state, field, value)
        # Write the whole row, not only the columns that differ from the read
        for field in WRITTEN_GAME_STATE_FIELDS:
            flag_modified(state, field)
        state = self.save(state)

        logger.info(
            "Game state updated",
            user_id=update.user_id,
            game_state_id=state.id,
            **changes,
        )
        return state

    def add_friends(self, user_id: str, friend_ids: list[str]) -> User:
        """
        Append ``friend_ids`` to the user's friends list.

        Ids already present are skipped; order of first appearance is kept.

        Raises:
            EntityNotFoundError: If the user or any friend does not exist
            ValidationError: If the user is listed as their own friend
        """
        user = self.get_by_id_required(user_id)
        if user_id in friend_ids:
            raise ValidationError("friend_ids", user_id, "a user cannot befriend itself")

        wanted = list(dict.fromkeys(friend_ids))
        try:
            found = set(
                self.session.exec(select(User.id).where(User.id.in_(wanted))).all()
            )
        except SQLAlchemyError as e:
            raise DatabaseError(f"Database error during add_friends: {str(e)}") from e
        for friend_id in wanted:
            if friend_id not in found:
                raise EntityNotFoundError(User.__name__, friend_id)

        current = user.friends_arr or []
        added = [friend_id for friend_id in wanted if friend_id not in current]
        if not added:
            return user

        user.friends = encode_friends(current + added)
        user = self.save(user)
        logger.info("Friends added", user_id=user_id, friend_ids=added)
        return user

    def get_friends(self, user_id: str) -> list[User]:
        """Users referenced by the friends list, in list order."""
        user = self.get_by_id_required(user_id)
        friend_ids = user.friends_arr or []
        if not friend_ids:
            return []

        try:
            statement = (
                select(User)
                .where(User.id.in_(friend_ids))
                .options(selectinload(User.game_state))
            )
            by_id = {friend.id: friend for friend in self.session.exec(statement)}
        except SQLAlchemyError as e:
            raise DatabaseError(f"Database error during get_friends: {str(e)}") from e
        # Friends deleted since they were added are dropped silently
        return [by_id[friend_id] for friend_id in friend_ids if friend_id in by_id]
