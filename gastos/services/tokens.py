import secrets
import string

from gastos.core.config import settings

TOKEN_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits


def generate_token(length: int | None = None) -> str:
    """Random alphanumeric invitation token."""
    length = length or settings.TOKEN_LENGTH
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(length))
