"""Record Identifiers — short random ids for stored documents.

Invariants:
    - Ids are drawn from the URL-safe alphabet A-Za-z0-9_-
    - Uniqueness is probabilistic only (no collision check against the store)
"""

import secrets
import string

URL_SAFE_ALPHABET = string.ascii_letters + string.digits + "_-"
DEFAULT_ID_LENGTH = 8


def generate_id(length: int = DEFAULT_ID_LENGTH) -> str:
    """Return a random id of ``length`` URL-safe characters."""
    if length < 1:
        raise ValueError("id length must be positive")
    return "".join(secrets.choice(URL_SAFE_ALPHABET) for _ in range(length))
