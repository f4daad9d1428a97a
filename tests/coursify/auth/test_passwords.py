import pytest

from coursify.auth.passwords import hash_password, verify_password


def test_hash_password_is_salted_and_verifiable() -> None:
    first = hash_password('correct horse')
    second = hash_password('correct horse')

    assert first != second
    assert first.startswith('$pbkdf2-sha256$')
    assert verify_password('correct horse', first)
    assert verify_password('correct horse', second)


def test_verify_password_rejects_other_secret() -> None:
    digest = hash_password('correct horse')

    assert not verify_password('battery staple', digest)
    assert not verify_password('Correct horse', digest)


def test_hash_password_rejects_empty_secret() -> None:
    with pytest.raises(ValueError):
        hash_password('')


@pytest.mark.parametrize('stored', ['', 'not-a-hash', '$2b$12$truncated'])
def test_verify_password_treats_unreadable_hash_as_mismatch(stored: str) -> None:
    assert verify_password('anything', stored) is False
