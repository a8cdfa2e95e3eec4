from __future__ import annotations

import base64
import binascii
import secrets

__all__ = [
    "TOKEN_BYTES",
    "TokenError",
    "TokenGenerationError",
    "MalformedTokenError",
    "generate_token",
    "decode_token",
]

# Raw entropy per token; 32 bytes -> 44 URL-safe base64 characters with padding.
TOKEN_BYTES = 32


# ------------------------
# Errors
# ------------------------
class TokenError(ValueError):
    """Base class for token-related errors.

    The `code` attribute lets the API map errors to stable machine codes.
    """

    code: str = "invalid_token"


class TokenGenerationError(TokenError):
    code = "token_generation_failed"


class MalformedTokenError(TokenError):
    code = "malformed_token"


# ------------------------
# Public generate/decode
# ------------------------

def generate_token(nbytes: int = TOKEN_BYTES) -> str:
    """Return a fresh opaque payment token.

    The token is `nbytes` drawn from the OS CSPRNG, URL-safe base64 encoded.
    It carries no information and is not recorded anywhere.
    """
    try:
        raw = secrets.token_bytes(nbytes)
    except (OSError, NotImplementedError) as e:
        raise TokenGenerationError("secure random source unavailable") from e
    return base64.urlsafe_b64encode(raw).decode("ascii")


def decode_token(token: str) -> bytes:
    """Decode a token back to its raw bytes.

    Raises `MalformedTokenError` if the token is not URL-safe base64 of
    exactly `TOKEN_BYTES` bytes.
    """
    try:
        raw = base64.urlsafe_b64decode(token.encode("ascii"))
    except (UnicodeEncodeError, binascii.Error) as e:
        raise MalformedTokenError("Token is not valid base64url") from e
    if len(raw) != TOKEN_BYTES:
        raise MalformedTokenError(f"Token decodes to {len(raw)} bytes, expected {TOKEN_BYTES}")
    return raw
