"""Session token codec.

A token is an itsdangerous-signed JSON payload::

    {"k": <principal kind>, "sub": <principal id>, "iat": <issued>, "exp": <expires>}

``verify_token`` returns ``None`` for every kind of failure (bad signature,
malformed payload, unknown kind, expired) so callers cannot tell which check
rejected the token.
"""

import time
from typing import NamedTuple, Optional

from flask import current_app
from itsdangerous import BadData, URLSafeSerializer

from .principals import PrincipalKind

TOKEN_SALT = 'wordrank-session-token'

SIGNED_KINDS = (PrincipalKind.PLAYER, PrincipalKind.ADMIN)


class TokenClaims(NamedTuple):
    kind: PrincipalKind
    principal_id: int
    issued_at: int
    expires_at: int


def _serializer(secret: Optional[str] = None) -> URLSafeSerializer:
    return URLSafeSerializer(secret or current_app.config['SECRET_KEY'], salt=TOKEN_SALT)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def issue_token(kind: PrincipalKind, principal_id: int, ttl: int,
                now: Optional[float] = None, secret: Optional[str] = None) -> str:
    if kind not in SIGNED_KINDS:
        raise ValueError(f"cannot issue a token for {kind!r}")
    issued_at = int(time.time() if now is None else now)
    payload = {
        'k': kind.value,
        'sub': int(principal_id),
        'iat': issued_at,
        'exp': issued_at + int(ttl),
    }
    return _serializer(secret).dumps(payload)


def verify_token(token: Optional[str], now: Optional[float] = None,
                 secret: Optional[str] = None) -> Optional[TokenClaims]:
    if not token or not isinstance(token, str):
        return None
    try:
        payload = _serializer(secret).loads(token)
    except BadData:
        return None
    try:
        kind = PrincipalKind(payload['k'])
        principal_id, issued_at, expires_at = payload['sub'], payload['iat'], payload['exp']
    except (KeyError, TypeError, ValueError):
        return None
    if kind not in SIGNED_KINDS:
        return None
    if not (_is_int(principal_id) and _is_int(issued_at) and _is_int(expires_at)):
        return None
    current = time.time() if now is None else now
    if current >= expires_at:
        return None
    return TokenClaims(kind, principal_id, issued_at, expires_at)


def ttl_for(kind: PrincipalKind) -> int:
    if kind is PrincipalKind.PLAYER:
        return int(current_app.config.get('PLAYER_SESSION_TTL_SEC', 60 * 60 * 24 * 7))
    if kind is PrincipalKind.ADMIN:
        return int(current_app.config.get('ADMIN_SESSION_TTL_SEC', 60 * 60 * 12))
    raise ValueError(f"no session lifetime for {kind!r}")
