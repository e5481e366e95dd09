"""
API routes for users, their game state and friends.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlmodel import Field, SQLModel

from thegame.models import (
    FriendsUpdate,
    NewUser,
    UserGameStatePublic,
    UserGameStateUpdate,
    UserPublic,
)
from thegame.repositories import UserRepository

router = APIRouter(prefix="/users", tags=["users"])


def get_user_repository() -> UserRepository:
    return UserRepository()


RepositoryDep = Annotated[UserRepository, Depends(get_user_repository)]


class GameStateIn(SQLModel):
    """Request body for game state updates; omitted counters stay as they are."""

    games_played: int | None = Field(default=None, ge=0)
    score: int | None = None


@router.post("", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
def create_user(new_user: NewUser, repo: RepositoryDep):
    """Create a user with an empty game state."""
    return UserPublic.from_user(repo.create(new_user))


@router.get("", response_model=list[UserPublic])
def read_users(repo: RepositoryDep):
    return [UserPublic.from_user(user) for user in repo.get_all()]


@router.get("/{user_id}", response_model=UserPublic)
def read_user(user_id: str, repo: RepositoryDep):
    user = repo.get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return UserPublic.from_user(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: str, repo: RepositoryDep):
    if not repo.delete(user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{user_id}/game-state", response_model=UserGameStatePublic)
def update_game_state(user_id: str, body: GameStateIn, repo: RepositoryDep):
    update = UserGameStateUpdate(
        user_id=user_id,
        **body.model_dump(exclude_unset=True),
    )
    return repo.update_game_state(update)


@router.post("/{user_id}/friends", response_model=UserPublic)
def add_friends(user_id: str, body: FriendsUpdate, repo: RepositoryDep):
    return UserPublic.from_user(repo.add_friends(user_id, body.friend_ids))


@router.get("/{user_id}/friends", response_model=list[UserPublic])
def read_friends(user_id: str, repo: RepositoryDep):
    return [UserPublic.from_user(friend) for friend in repo.get_friends(user_id)]
