# tests/test_security.py
import jwt
import pytest

from newsverify.errors import InvalidToken
from newsverify.models import UserRole
from newsverify.security import hash_password, issue_token, verify_password, verify_token


def test_password_hash_is_salted_and_verifiable():
    h1 = hash_password("hunter22")
    h2 = hash_password("hunter22")
    assert h1 != h2
    assert "hunter22" not in h1
    assert verify_password("hunter22", h1)
    assert verify_password("hunter22", h2)


def test_wrong_or_corrupt_password_returns_false():
    h = hash_password("hunter22")
    assert verify_password("hunter23", h) is False
    assert verify_password("hunter22", "not-a-hash") is False
    assert verify_password("hunter22", None) is False


def test_token_carries_user_and_role():
    token = issue_token("user-1", UserRole.MEMBER)
    claims = verify_token(token)
    assert claims == {"userId": "user-1", "role": UserRole.MEMBER}


@pytest.mark.parametrize("token", [None, "", "garbage", "a.b.c"])
def test_missing_or_malformed_token_is_rejected(token):
    with pytest.raises(InvalidToken):
        verify_token(token)


def test_forged_token_is_rejected():
    forged = jwt.encode({"userId": "user-1", "role": "ADMIN"}, "other-secret", algorithm="HS256")
    with pytest.raises(InvalidToken):
        verify_token(forged)


def test_token_with_unknown_role_is_rejected():
    from newsverify.config import get_settings
    token = jwt.encode({"userId": "user-1", "role": "SUPERUSER"}, get_settings().secret_key, algorithm="HS256")
    with pytest.raises(InvalidToken):
        verify_token(token)


def test_token_without_user_is_rejected():
    from newsverify.config import get_settings
    token = jwt.encode({"role": "ADMIN"}, get_settings().secret_key, algorithm="HS256")
    with pytest.raises(InvalidToken):
        verify_token(token)
