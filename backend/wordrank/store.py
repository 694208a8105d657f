"""Credential store adapter.

The only module that talks to the database. Every query goes through the
SQLAlchemy expression API so values are always bound parameters. Driver or
query failures are rolled back, logged, and re-raised as ``DataUnavailable``.
"""

from functools import wraps
from typing import List, Optional, Tuple

from flask import current_app
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from wordrank import db
from wordrank.errors import Conflict, DataUnavailable
from wordrank.models import AdminAuditLog, AdminUser, Player, ScoreEvent, Word
from wordrank.services.leaderboard.ranking import Standing
from wordrank.services.leaderboard.windows import WindowKind


SORTABLE_PLAYER_COLUMNS = {
    'display_name': Player.display_name,
    'email': Player.email,
    'phone_number': Player.phone_number,
    'total_score': Player.total_score,
    'games_played': Player.games_played,
    'created_at': Player.created_at,
    'is_active': Player.is_active,
}


def _store_call(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except SQLAlchemyError:
            db.session.rollback()
            current_app.logger.exception(f"[store-error] {fn.__name__} failed")
            raise DataUnavailable()
    return wrapper


# ---- Players ----

@_store_call
def find_player_by_id(player_id: int) -> Optional[Player]:
    return db.session.get(Player, player_id)


@_store_call
def find_player_by_email(email: str) -> Optional[Player]:
    return Player.query.filter_by(email=email.strip().lower()).first()


@_store_call
def create_player(email: str, password: str, display_name: Optional[str] = None) -> Player:
    normalized = email.strip().lower()
    if Player.query.filter_by(email=normalized).first():
        raise Conflict('Email is already registered')
    player = Player(email=normalized, display_name=display_name or None)
    player.set_password(password)
    db.session.add(player)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict('Email is already registered')
    return player


@_store_call
def update_player_active(player_id: int, is_active: bool) -> Optional[Player]:
    player = db.session.get(Player, player_id)
    if not player:
        return None
    player.is_active = is_active
    db.session.add(player)
    db.session.commit()
    return player


@_store_call
def delete_player(player_id: int) -> bool:
    if not db.session.get(Player, player_id):
        return False
    ScoreEvent.query.filter_by(player_id=player_id).delete(synchronize_session=False)
    Player.query.filter_by(id=player_id).delete(synchronize_session=False)
    db.session.commit()
    db.session.expire_all()
    return True


@_store_call
def list_players(q: Optional[str] = None, page: int = 1, limit: Optional[int] = 20,
                 sort_by: str = 'created_at', sort_order: str = 'desc') -> Tuple[List[Player], int]:
    query = Player.query
    if q and q.strip():
        pattern = f"%{q.strip()}%"
        query = query.filter(or_(
            Player.display_name.ilike(pattern),
            Player.email.ilike(pattern),
            Player.phone_number.ilike(pattern),
        ))
    total = query.count()
    column = SORTABLE_PLAYER_COLUMNS.get(sort_by, Player.created_at)
    ordering = column.asc() if sort_order.lower() == 'asc' else column.desc()
    query = query.order_by(ordering, Player.id.asc())
    if limit is not None:
        query = query.offset((page - 1) * limit).limit(limit)
    return query.all(), total


# ---- Admins ----

@_store_call
def find_admin_by_id(admin_id: int) -> Optional[AdminUser]:
    return db.session.get(AdminUser, admin_id)


@_store_call
def find_admin_by_email(email: str) -> Optional[AdminUser]:
    return AdminUser.query.filter_by(email=email.strip().lower()).first()


@_store_call
def count_admins() -> int:
    return AdminUser.query.count()


@_store_call
def upsert_admin(email: str, password: str, role: Optional[str] = None) -> AdminUser:
    normalized = email.strip().lower()
    admin_user = AdminUser.query.filter_by(email=normalized).first()
    if not admin_user:
        admin_user = AdminUser(email=normalized)
    admin_user.set_password(password)
    if role:
        admin_user.role = role
    db.session.add(admin_user)
    db.session.commit()
    return admin_user


# ---- Audit ----

@_store_call
def append_admin_audit_log(admin_id: Optional[int], action: str, resource_type: str,
                           resource_id: Optional[str] = None, details: Optional[dict] = None,
                           ip_address: Optional[str] = None, user_agent: Optional[str] = None) -> AdminAuditLog:
    entry = AdminAuditLog(
        admin_id=admin_id,
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        details=details or {},
        ip_address=ip_address,
        user_agent=user_agent,
    )
    db.session.add(entry)
    db.session.commit()
    return entry


@_store_call
def list_admin_audit_logs(page: int = 1, limit: int = 50, admin_id: Optional[int] = None,
                          action: Optional[str] = None) -> Tuple[List[AdminAuditLog], int]:
    query = AdminAuditLog.query
    if admin_id is not None:
        query = query.filter(AdminAuditLog.admin_id == admin_id)
    if action:
        query = query.filter(AdminAuditLog.action == action.upper())
    total = query.count()
    query = query.order_by(AdminAuditLog.created_at.desc(), AdminAuditLog.id.desc())
    return query.offset((page - 1) * limit).limit(limit).all(), total


# ---- Content ----

@_store_call
def delete_word(word_id: int) -> bool:
    deleted = Word.query.filter_by(id=word_id).delete(synchronize_session=False)
    db.session.commit()
    return deleted == 1


# ---- Scores ----

@_store_call
def append_score_event(player_id: int, points: int, is_challenge: bool = False,
                       subject_id: Optional[int] = None) -> ScoreEvent:
    """Insert a score event and bump the player's accumulators in one commit.

    The accumulator update is a relative ``SET col = col + :n`` so concurrent
    submissions for the same player add up without read-modify-write.
    """
    event = ScoreEvent(player_id=player_id, points=points, is_challenge=is_challenge, subject_id=subject_id)
    db.session.add(event)
    Player.query.filter_by(id=player_id).update({
        Player.total_score: Player.total_score + points,
        Player.games_played: Player.games_played + 1,
    }, synchronize_session=False)
    db.session.commit()
    return event


@_store_call
def recent_score_events(player_id: int, limit: int = 10) -> List[ScoreEvent]:
    return (
        ScoreEvent.query.filter_by(player_id=player_id)
        .order_by(ScoreEvent.created_at.desc(), ScoreEvent.id.desc())
        .limit(limit)
        .all()
    )


@_store_call
def sum_scores_for_window(window: WindowKind, since=None) -> List[Standing]:
    """Per-player totals over the events that qualify for ``window``.

    Periodic windows count every event at or after ``since``; the challenge
    track counts every challenge-flagged event. Only active players appear.
    """
    query = (
        db.session.query(
            ScoreEvent.player_id,
            Player.display_name,
            func.sum(ScoreEvent.points).label('score'),
            func.min(ScoreEvent.created_at).label('first_scored_at'),
        )
        .join(Player, Player.id == ScoreEvent.player_id)
        .filter(Player.is_active.is_(True))
    )
    if window is WindowKind.CHALLENGE:
        query = query.filter(ScoreEvent.is_challenge.is_(True))
    elif since is not None:
        query = query.filter(ScoreEvent.created_at >= since)
    rows = query.group_by(ScoreEvent.player_id, Player.display_name).all()
    return [
        Standing(
            player_id=row.player_id,
            display_name=row.display_name or f'Player {row.player_id}',
            score=int(row.score or 0),
            first_scored_at=row.first_scored_at,
        )
        for row in rows
    ]
