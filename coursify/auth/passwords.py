"""Password hashing helpers.

Secrets are stored as salted pbkdf2_sha256 hashes through passlib's
CryptContext, so the scheme can be rotated later by adding it in front of the
list and marking the old one deprecated.
"""

from passlib.context import CryptContext

from coursify.core import config

pwd_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
    pbkdf2_sha256__default_rounds=config.PASSWORD_HASH_ROUNDS,
)


def hash_password(password: str) -> str:
    if not password:
        raise ValueError("Password must not be empty.")
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Unrecognized or corrupted hash.
        return False


def dummy_verify() -> None:
    """Spend the same time as a real verification for unknown accounts."""
    pwd_context.dummy_verify()
