from thegame.models.user import (
    FriendsUpdate,
    NewUser,
    User,
    UserGameState,
    UserGameStatePublic,
    UserGameStateUpdate,
    UserPublic,
    decode_friends,
    encode_friends,
)

__all__ = [
    "FriendsUpdate",
    "NewUser",
    "User",
    "UserGameState",
    "UserGameStatePublic",
    "UserGameStateUpdate",
    "UserPublic",
    "decode_friends",
    "encode_friends",
]
