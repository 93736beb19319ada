# PBKDF2 password hashing for local accounts.
import base64
import os
from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from cryptography.hazmat.primitives import hashes

PBKDF2_ITERATIONS = 250_000
SALT_LENGTH = 16
KEY_LENGTH = 32


def generate_salt() -> bytes:
    return os.urandom(SALT_LENGTH)


def _kdf(salt: bytes) -> PBKDF2HMAC:
    return PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=salt,
        iterations=PBKDF2_ITERATIONS,
    )


def hash_password(password: str, salt: bytes) -> str:
    return base64.b64encode(_kdf(salt).derive(password.encode("utf-8"))).decode("ascii")


def verify_password(password: str, salt: bytes, hashed_b64: str) -> bool:
    try:
        _kdf(salt).verify(password.encode("utf-8"), base64.b64decode(hashed_b64))
    except InvalidKey:
        return False
    return True


def salt_to_b64(salt: bytes) -> str:
    return base64.b64encode(salt).decode("ascii")


def b64_to_salt(b64: str) -> bytes:
    return base64.b64decode(b64)
