from functools import wraps

from flask import current_app, jsonify, request

from .permissions import ACTIONS, has_permission
from .principals import Principal, PrincipalKind
from .resolver import resolve_principal


def check_access(principal: Principal, required: PrincipalKind):
    """Return ``None`` when ``principal`` may proceed, else an error response."""
    kind = principal.kind
    if kind is PrincipalKind.ANONYMOUS:
        return jsonify({'error': 'Unauthorized'}), 401
    if kind is PrincipalKind.PLAYER or kind is PrincipalKind.ADMIN:
        if kind is required:
            return None
        return jsonify({'error': 'Forbidden'}), 403
    raise AssertionError(f"unhandled principal kind {kind!r}")


def require(kind: PrincipalKind):
    """Gate a view on ``kind``. The view receives the principal as its first argument.

    Denied requests never reach the view.
    """
    if kind is PrincipalKind.ANONYMOUS:
        raise ValueError('a guard must require an authenticated principal kind')

    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            principal = resolve_principal(request, preferred=kind)
            denial = check_access(principal, kind)
            if denial is not None:
                current_app.logger.info(
                    f"[auth-deny] path={request.path} required={kind.value} got={principal.kind.value}"
                )
                return denial
            return view(principal, *args, **kwargs)
        return wrapped
    return decorator


player_required = require(PrincipalKind.PLAYER)
admin_required = require(PrincipalKind.ADMIN)


def require_admin_permission(resource, action):
    """Gate a view on an admin principal whose role grants ``action`` on ``resource``.

    Non-admins get the usual 401/403 from ``admin_required``; admins whose role
    lacks the permission get 403.
    """
    if action not in ACTIONS:
        raise ValueError(f"unknown admin action {action!r}")

    def decorator(view):
        @admin_required
        @wraps(view)
        def wrapped(principal, *args, **kwargs):
            if not has_permission(principal.role, resource, action):
                current_app.logger.info(
                    f"[auth-deny] path={request.path} admin={principal.id} role={principal.role} "
                    f"lacks {resource}.{action}"
                )
                return jsonify({'error': 'Insufficient permissions'}), 403
            return view(principal, *args, **kwargs)
        return wrapped
    return decorator
