"""Password hashing and verification (bcrypt) for stored credentials."""

import bcrypt


# Min/max lengths for password validation; bcrypt only looks at the first 72 bytes.
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128

NAME_MIN_LEN = 2
NAME_MAX_LEN = 255


def hash_password(plain_password: str, rounds: int) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False
