"""Role x resource x action table for admin principals.

Anything not listed is denied, including unknown roles.
"""

ACTIONS = ('can_create', 'can_read', 'can_update', 'can_delete')

_ALL = frozenset(ACTIONS)

ROLE_PERMISSIONS = {
    'super_admin': {
        'players': _ALL,
        'subjects': _ALL,
        'words': _ALL,
        'admins': _ALL,
    },
    'admin': {
        'players': frozenset({'can_read', 'can_update', 'can_delete'}),
        'subjects': _ALL,
        'words': _ALL,
        'admins': frozenset({'can_read'}),
    },
    'moderator': {
        'players': frozenset({'can_read', 'can_update'}),
        'subjects': frozenset({'can_read'}),
        'words': frozenset({'can_read', 'can_update'}),
    },
}

ROLES = tuple(ROLE_PERMISSIONS)


def has_permission(role, resource, action):
    if action not in ACTIONS:
        raise ValueError(f"unknown admin action {action!r}")
    return action in ROLE_PERMISSIONS.get(role, {}).get(resource, frozenset())
