"""Persisted trail of admin logins and mutations."""

from flask import current_app, request

from wordrank import store
from wordrank.errors import DataUnavailable


def _client_ip(req):
    forwarded = req.headers.get('X-Forwarded-For', '')
    ip = forwarded.split(',')[0].strip() or req.headers.get('X-Real-IP') or req.remote_addr
    return (ip or 'unknown')[:64]


def log_admin_action(admin_id, action, resource_type, resource_id=None, details=None):
    """Record an admin action against the current request.

    The action has already happened by the time this runs, so a failed write is
    logged and the request carries on.
    """
    current_app.logger.info(
        f"[admin-audit] admin={admin_id} {action} {resource_type}={resource_id} details={details or {}}"
    )
    try:
        return store.append_admin_audit_log(
            admin_id,
            action,
            resource_type,
            resource_id=str(resource_id) if resource_id is not None else None,
            details=details,
            ip_address=_client_ip(request),
            user_agent=(request.headers.get('User-Agent') or 'unknown')[:255],
        )
    except DataUnavailable:
        current_app.logger.warning(f"[admin-audit] failed to persist {action} {resource_type}={resource_id}")
        return None
