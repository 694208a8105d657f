from typing import Iterator, Optional, Tuple

from flask import current_app

from wordrank import store
from wordrank.errors import DataUnavailable
from .principals import ANONYMOUS, AdminPrincipal, PlayerPrincipal, Principal, PrincipalKind
from .tokens import TokenClaims, issue_token, ttl_for, verify_token


# ---- Transport ----

def cookie_name_for(kind: PrincipalKind) -> str:
    if kind is PrincipalKind.PLAYER:
        return current_app.config.get('PLAYER_COOKIE_NAME', 'player_token')
    if kind is PrincipalKind.ADMIN:
        return current_app.config.get('ADMIN_COOKIE_NAME', 'admin_token')
    raise ValueError(f"no session cookie for {kind!r}")


def is_secure_request(req) -> bool:
    return req.is_secure or req.headers.get('X-Forwarded-Proto', '').lower() == 'https'


def set_session_cookie(response, req, kind: PrincipalKind, token: str) -> None:
    response.set_cookie(
        cookie_name_for(kind),
        token,
        max_age=ttl_for(kind),
        httponly=True,
        samesite='Lax',
        secure=is_secure_request(req),
        path='/',
    )


def clear_session_cookie(response, req, kind: PrincipalKind) -> None:
    response.set_cookie(
        cookie_name_for(kind),
        '',
        max_age=0,
        httponly=True,
        samesite='Lax',
        secure=is_secure_request(req),
        path='/',
    )


def start_session(response, req, kind: PrincipalKind, principal_id: int) -> str:
    token = issue_token(kind, principal_id, ttl_for(kind))
    set_session_cookie(response, req, kind, token)
    return token


# ---- Resolution ----

def _bearer_token(req) -> Optional[str]:
    header = req.headers.get('Authorization', '')
    if header.startswith('Bearer '):
        return header[len('Bearer '):].strip() or None
    return None


def _candidate_tokens(req, preferred: Optional[PrincipalKind]) -> Iterator[Tuple[Optional[PrincipalKind], str]]:
    """Yield (kind bound to the transport, token) in lookup order.

    A cookie is bound to one principal kind; the bearer header is not.
    """
    order = [PrincipalKind.PLAYER, PrincipalKind.ADMIN]
    if preferred is PrincipalKind.ADMIN:
        order.reverse()
    for kind in order:
        token = req.cookies.get(cookie_name_for(kind))
        if token:
            yield kind, token
    bearer = _bearer_token(req)
    if bearer:
        yield None, bearer


def _load_principal(claims: TokenClaims) -> Principal:
    if claims.kind is PrincipalKind.PLAYER:
        player = store.find_player_by_id(claims.principal_id)
        if player is None or not player.is_active:
            return ANONYMOUS
        return PlayerPrincipal(id=player.id, display_name=player.public_name, is_active=player.is_active)
    if claims.kind is PrincipalKind.ADMIN:
        admin_user = store.find_admin_by_id(claims.principal_id)
        if admin_user is None:
            return ANONYMOUS
        return AdminPrincipal(id=admin_user.id, email=admin_user.email, role=admin_user.role)
    return ANONYMOUS


def resolve_principal(req, preferred: Optional[PrincipalKind] = None) -> Principal:
    """Resolve who is making ``req``. Never raises; failures degrade to Anonymous.

    Each candidate token is verified and its record re-read from the store, so
    deactivation or deletion takes effect on the next request.
    """
    for bound_kind, token in _candidate_tokens(req, preferred):
        claims = verify_token(token)
        if claims is None:
            continue
        if bound_kind is not None and claims.kind is not bound_kind:
            continue
        try:
            principal = _load_principal(claims)
        except DataUnavailable:
            current_app.logger.warning(
                f"[auth-resolve] store unavailable while loading {claims.kind.value}={claims.principal_id}"
            )
            return ANONYMOUS
        if principal.is_authenticated:
            return principal
    return ANONYMOUS
