"""Random code generation for registration tickets and seeded access codes."""

import secrets
import string

ALPHABET = string.ascii_uppercase + string.digits


def random_code(length: int, alphabet: str = ALPHABET) -> str:
    return "".join(secrets.choice(alphabet) for _ in range(length))
