from datetime import timedelta

import jwt
import pytest

from topic_news.core.security import (
    ACCESS_TOKEN_TYPE,
    create_access_token,
    create_token,
    verify_token,
)


def test_access_token_round_trip():
    payload = verify_token(create_access_token("abc"))

    assert payload["sub"] == "abc"
    assert payload["type"] == ACCESS_TOKEN_TYPE


def test_expired_token_rejected():
    token = create_token("abc", ACCESS_TOKEN_TYPE, timedelta(seconds=-1))

    with pytest.raises(jwt.ExpiredSignatureError):
        verify_token(token)


def test_token_signed_with_other_secret_rejected():
    token = jwt.encode({"sub": "abc", "type": "access"}, "not-the-secret", algorithm="HS256")

    with pytest.raises(jwt.InvalidTokenError):
        verify_token(token)
