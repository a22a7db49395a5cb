"""Password hashing utilities.

Learn: Uses bcrypt for secure password hashing. bcrypt automatically
handles salting and is resistant to rainbow table attacks.

Rows written before hashing was introduced store the password as-is.
Anything that isn't a bcrypt hash is treated as such a legacy plaintext
value: compared in constant time, and reported by needs_upgrade() so the
login route can re-hash it.
"""

import re
import secrets

import bcrypt

DEFAULT_ROUNDS = 12

# Modular crypt format: $2a$ / $2b$ / $2y$, two-digit cost, 53 chars of salt+hash.
_BCRYPT_HASH = re.compile(r"\$2[aby]\$\d\d\$[./A-Za-z0-9]{53}")


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password with bcrypt.

    Passwords are truncated to 72 bytes (bcrypt's limit).
    """
    pw_bytes = password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against a bcrypt hash or a legacy plaintext value."""
    if _is_legacy(password_hash):
        return secrets.compare_digest(
            password.encode("utf-8"), password_hash.encode("utf-8")
        )
    try:
        pw_bytes = password.encode("utf-8")[:72]
        return bcrypt.checkpw(pw_bytes, password_hash.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def needs_upgrade(password_hash: str) -> bool:
    """Check if a stored password should be re-hashed with bcrypt."""
    return _is_legacy(password_hash)


def _is_legacy(password_hash: str) -> bool:
    return _BCRYPT_HASH.fullmatch(password_hash) is None
