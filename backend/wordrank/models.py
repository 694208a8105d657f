from datetime import datetime, timezone

from wordrank import db, bcrypt


def utcnow():
    """Naive UTC timestamp, the form every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Player(db.Model):
    __tablename__ = 'player'
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    phone_number = db.Column(db.String(32), nullable=True)
    display_name = db.Column(db.String(64), nullable=True)
    password_hash = db.Column(db.String(128), nullable=False)
    total_score = db.Column(db.Integer, default=0, nullable=False)
    games_played = db.Column(db.Integer, default=0, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    score_events = db.relationship('ScoreEvent', back_populates='player', lazy='dynamic')

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    @property
    def public_name(self):
        return self.display_name or f'Player {self.id}'

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'phone_number': self.phone_number,
            'display_name': self.display_name,
            'total_score': self.total_score,
            'games_played': self.games_played,
            'is_active': self.is_active,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


class AdminUser(db.Model):
    __tablename__ = 'admin_user'
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(128), nullable=False)
    role = db.Column(db.String(32), default='admin', nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'role': self.role,
        }


class Subject(db.Model):
    __tablename__ = 'subject'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    difficulty = db.Column(db.String(16), default='easy', nullable=False)  # easy, medium, hard
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    words = db.relationship('Word', back_populates='subject', cascade='all, delete-orphan')


class Word(db.Model):
    __tablename__ = 'word'
    id = db.Column(db.Integer, primary_key=True)
    subject_id = db.Column(db.Integer, db.ForeignKey('subject.id'), nullable=False)
    word = db.Column(db.String(64), nullable=False)
    hint = db.Column(db.Text, nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    subject = db.relationship('Subject', back_populates='words')

    def __init__(self, **kwargs):
        super(Word, self).__init__(**kwargs)
        if self.word:
            self.word = self.word.upper()


class ScoreEvent(db.Model):
    """One finished game's points. Rows are only ever inserted."""
    __tablename__ = 'score_event'
    __table_args__ = (db.CheckConstraint('points >= 0', name='ck_score_event_points_non_negative'),)
    id = db.Column(db.Integer, primary_key=True)
    player_id = db.Column(db.Integer, db.ForeignKey('player.id', ondelete='CASCADE'), nullable=False, index=True)
    points = db.Column(db.Integer, nullable=False)
    is_challenge = db.Column(db.Boolean, default=False, nullable=False)
    subject_id = db.Column(db.Integer, db.ForeignKey('subject.id', ondelete='SET NULL'), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    player = db.relationship('Player', back_populates='score_events')

    def to_dict(self):
        return {
            'id': self.id,
            'player_id': self.player_id,
            'points': self.points,
            'is_challenge': self.is_challenge,
            'subject_id': self.subject_id,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


class AdminAuditLog(db.Model):
    """One admin mutation or login. Rows are only ever inserted."""
    __tablename__ = 'admin_audit_log'
    id = db.Column(db.Integer, primary_key=True)
    admin_id = db.Column(db.Integer, db.ForeignKey('admin_user.id', ondelete='SET NULL'), nullable=True, index=True)
    action = db.Column(db.String(32), nullable=False)  # LOGIN, CREATE, UPDATE, DELETE, ACTIVATE, DEACTIVATE
    resource_type = db.Column(db.String(32), nullable=False)  # ADMIN_USER, PLAYER, WORD, ...
    resource_id = db.Column(db.String(64), nullable=True)
    details = db.Column(db.JSON, nullable=True)
    ip_address = db.Column(db.String(64), nullable=True)
    user_agent = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'admin_id': self.admin_id,
            'action': self.action,
            'resource_type': self.resource_type,
            'resource_id': self.resource_id,
            'details': self.details or {},
            'ip_address': self.ip_address,
            'user_agent': self.user_agent,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
