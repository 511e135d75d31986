"""Opaque token generation.

Learn: secrets.token_urlsafe(n) reads n bytes from the OS CSPRNG and
returns them as unpadded URL-safe base64, so tokens are safe in cookies
and in URL paths without escaping. Collisions are astronomically
unlikely; the unique constraints on the token columns catch them anyway.
"""

import secrets

SESSION_TOKEN_BYTES = 32
SHARE_TOKEN_BYTES = 24


def new_session_token() -> str:
    return secrets.token_urlsafe(SESSION_TOKEN_BYTES)


def new_share_token() -> str:
    return secrets.token_urlsafe(SHARE_TOKEN_BYTES)
