"""
SQLModel table definitions for users and their game state.

These models serve both as SQLAlchemy ORM mappings and as Pydantic models.
Input and response shapes live next to the tables they describe.
"""

import json
from typing import Optional
from uuid import uuid4

from sqlmodel import Field, Relationship, SQLModel


def new_id() -> str:
    return str(uuid4())


def encode_friends(friend_ids: list[str] | None) -> str:
    """Serialise a friends list the way it is stored in ``users.friends``."""
    return json.dumps(friend_ids, separators=(",", ":"))


def decode_friends(raw: str | None) -> list[str] | None:
    if not raw:
        return None
    return json.loads(raw)


# Game state tables
class UserGameStateBase(SQLModel):
    """Counters tracked per user."""

    games_played: int = Field(default=0, ge=0)
    score: int = Field(default=0)


class UserGameState(UserGameStateBase, table=True):
    """Game state table definition, one row per user."""

    __tablename__ = "game_states"

    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(foreign_key="users.id", unique=True, index=True)

    user: Optional["User"] = Relationship(back_populates="game_state")


class UserGameStateUpdate(SQLModel):
    """Game state update model. Counters left as None are not touched."""

    user_id: str
    games_played: int | None = Field(default=None, ge=0)
    score: int | None = None


class UserGameStatePublic(UserGameStateBase):
    """Game state model for API responses."""

    id: str
    user_id: str


# User tables
class User(SQLModel, table=True):
    """User table definition."""

    __tablename__ = "users"

    id: str = Field(default_factory=new_id, primary_key=True)
    name: str = Field(max_length=255)
    # JSON encoded list of user ids, "null" when the user has no friends
    friends: str = Field(default="null")

    game_state: Optional[UserGameState] = Relationship(
        back_populates="user",
        sa_relationship_kwargs={"uselist": False, "cascade": "all, delete-orphan"},
    )

    @property
    def friends_arr(self) -> list[str] | None:
        return decode_friends(self.friends)


class NewUser(SQLModel):
    """User creation model."""

    name: str = Field(min_length=1, max_length=255)


class FriendsUpdate(SQLModel):
    friend_ids: list[str] = Field(min_length=1)


class UserPublic(SQLModel):
    """User model for API responses."""

    id: str
    name: str
    friends: list[str] | None = None
    game_state: UserGameStatePublic | None = None

    @classmethod
    def from_user(cls, user: User) -> "UserPublic":
        game_state = None
        if user.game_state is not None:
            game_state = UserGameStatePublic.model_validate(user.game_state)
        return cls(
            id=user.id,
            name=user.name,
            friends=user.friends_arr,
            game_state=game_state,
        )
