"""
Database repositories.
"""

from .base import BaseRepository
from .user_repository import UserRepository, game_state_for_user_query

__all__ = ["BaseRepository", "UserRepository", "game_state_for_user_query"]
