from datetime import datetime, timedelta
from uuid import UUID

from chatweet.utils.tokens import compute_expiry, generate_session_token, hash_session_token


def test_session_token_is_two_uuid4s():
    token = generate_session_token()

    first, second = token[:36], token[37:]
    assert token[36] == "-"
    assert UUID(first).version == 4
    assert UUID(second).version == 4


def test_session_tokens_do_not_repeat():
    tokens = {generate_session_token() for _ in range(1000)}
    assert len(tokens) == 1000


def test_token_hash_is_stable_sha256_hex():
    token = generate_session_token()

    digest = hash_session_token(token)

    assert digest == hash_session_token(token)
    assert len(digest) == 64
    assert token not in digest
    assert hash_session_token(token + "x") != digest


def test_default_expiry_is_24_hours():
    issued = datetime(2026, 1, 31, 23, 0, 0)
    assert compute_expiry(issued) == datetime(2026, 2, 1, 23, 0, 0)
    assert compute_expiry(issued, timedelta(minutes=5)) == datetime(2026, 1, 31, 23, 5, 0)
