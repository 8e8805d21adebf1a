from __future__ import annotations

from itsdangerous import BadData, URLSafeTimedSerializer


def _serializer(secret_key: str) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(secret_key=secret_key, salt="bookmark-delete")


def create_delete_token(secret_key: str, user_id: int, bookmark_id: int) -> str:
    return _serializer(secret_key).dumps(
        {"user_id": user_id, "bookmark_id": bookmark_id}
    )


def verify_delete_token(
    secret_key: str,
    token: str,
    max_age: int,
    expected_user_id: int,
    expected_bookmark_id: int,
) -> bool:
    try:
        payload = _serializer(secret_key).loads(token, max_age=max_age)
    except BadData:
        return False
    return (
        payload.get("user_id") == expected_user_id
        and payload.get("bookmark_id") == expected_bookmark_id
    )
