import re
import secrets
import string

IDENTIFIER_ALPHABET = string.ascii_letters + string.digits
IDENTIFIER_RE = re.compile(r"[A-Za-z0-9]{1,64}")


def generate_identifier(length: int = 10) -> str:
    """Return a random alphanumeric identifier drawn from a CSPRNG."""
    return "".join(secrets.choice(IDENTIFIER_ALPHABET) for _ in range(length))


def is_valid_identifier(value: str) -> bool:
    return IDENTIFIER_RE.fullmatch(value) is not None
