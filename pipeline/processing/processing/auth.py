"""Bearer tokens: itsdangerous-signed user ids."""

from __future__ import annotations

import uuid
from typing import Optional

from itsdangerous import BadData, URLSafeSerializer

_SALT = "pericias-session"


def _serializer(secret_key: str) -> URLSafeSerializer:
    return URLSafeSerializer(secret_key, salt=_SALT)


def issue_token(user_id: uuid.UUID, secret_key: str) -> str:
    return _serializer(secret_key).dumps(str(user_id))


def verify_token(token: Optional[str], secret_key: str) -> Optional[uuid.UUID]:
    """Return the signed user id, or ``None`` for a missing or forged token."""
    if not token:
        return None
    try:
        return uuid.UUID(_serializer(secret_key).loads(token))
    except (BadData, ValueError, TypeError):
        return None
