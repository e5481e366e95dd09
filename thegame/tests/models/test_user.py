from thegame.models import (
    User,
    UserGameState,
    UserPublic,
    decode_friends,
    encode_friends,
)


def test_table_names() -> None:
    assert User.__tablename__ == "users"
    assert UserGameState.__tablename__ == "game_states"
    assert set(User.__table__.columns.keys()) == {"id", "name", "friends"}
    assert set(UserGameState.__table__.columns.keys()) == {
        "id",
        "games_played",
        "score",
        "user_id",
    }


def test_encode_friends_is_compact() -> None:
    assert encode_friends(None) == "null"
    assert encode_friends([]) == "[]"
    assert encode_friends(["uuid1", "uuid2", "uuid3"]) == '["uuid1","uuid2","uuid3"]'


def test_decode_friends() -> None:
    assert decode_friends("null") is None
    assert decode_friends("") is None
    assert decode_friends('["uuid1","uuid2"]') == ["uuid1", "uuid2"]


def test_friends_arr_follows_friends_column() -> None:
    user = User(id="uuid", name="John Doe")
    assert user.friends == "null"
    assert user.friends_arr is None

    user.friends = '["uuid1"]'
    assert user.friends_arr == ["uuid1"]


def test_user_public_from_user() -> None:
    user = User(
        id="uuid",
        name="John Doe",
        friends='["uuid1","uuid2"]',
        game_state=UserGameState(id="uuid0", user_id="uuid", games_played=12, score=15),
    )

    public = UserPublic.from_user(user)

    assert public.model_dump() == {
        "id": "uuid",
        "name": "John Doe",
        "friends": ["uuid1", "uuid2"],
        "game_state": {
            "id": "uuid0",
            "user_id": "uuid",
            "games_played": 12,
            "score": 15,
        },
    }


def test_user_public_without_game_state() -> None:
    public = UserPublic.from_user(User(id="uuid", name="John Doe"))

    assert public.friends is None
    assert public.game_state is None
