"""The principal union resolved for every request.

Exactly three variants exist. Call sites branch on ``principal.kind`` and
treat an unexpected kind as a programming error, so a new variant shows up
at every guard rather than silently falling through.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from flask_login import AnonymousUserMixin, UserMixin


class PrincipalKind(str, Enum):
    ANONYMOUS = 'anonymous'
    PLAYER = 'player'
    ADMIN = 'admin'


@dataclass(frozen=True)
class Anonymous(AnonymousUserMixin):
    kind = PrincipalKind.ANONYMOUS

    def to_dict(self):
        return {'kind': self.kind.value}


@dataclass(frozen=True)
class PlayerPrincipal(UserMixin):
    id: int
    display_name: str
    is_active: bool = True
    kind = PrincipalKind.PLAYER

    def get_id(self):
        return f"{self.kind.value}:{self.id}"

    def to_dict(self):
        return {'kind': self.kind.value, 'id': self.id, 'display_name': self.display_name}


@dataclass(frozen=True)
class AdminPrincipal(UserMixin):
    id: int
    email: str
    role: str = 'admin'
    kind = PrincipalKind.ADMIN

    def get_id(self):
        return f"{self.kind.value}:{self.id}"

    def to_dict(self):
        return {'kind': self.kind.value, 'id': self.id, 'email': self.email, 'role': self.role}


Principal = Union[Anonymous, PlayerPrincipal, AdminPrincipal]

ANONYMOUS = Anonymous()
