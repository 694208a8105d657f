from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
from werkzeug.exceptions import HTTPException
import click
from config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()
allowed_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from wordrank.main import main
    flask_app.register_blueprint(main)

    from wordrank.api.auth import auth
    flask_app.register_blueprint(auth, url_prefix='/api/auth')

    from wordrank.api.game import game
    flask_app.register_blueprint(game, url_prefix='/api')

    from wordrank.api.leaderboard import leaderboard
    flask_app.register_blueprint(leaderboard, url_prefix='/api/leaderboard')

    from wordrank.api.admin import admin
    flask_app.register_blueprint(admin, url_prefix='/api/admin')

    from wordrank.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    _register_error_handlers(flask_app)

    # Socket.IO handshakes read the principal through Flask-Login; HTTP routes
    # get it threaded in by the access guard instead.
    from wordrank.services.auth.principals import Anonymous
    from wordrank.services.auth.resolver import resolve_principal

    login_manager.anonymous_user = Anonymous

    @login_manager.request_loader
    def load_principal(req):
        principal = resolve_principal(req)
        return principal if principal.is_authenticated else None

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from wordrank.models import Player, Subject, Word
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            animals = Subject(name='Animals', difficulty='easy')
            capitals = Subject(name='Capitals', difficulty='medium')
            db.session.add_all([animals, capitals])
            db.session.flush()
            for w, hint in [('TIGER', 'Striped big cat'), ('OTTER', 'Holds hands while sleeping'),
                            ('EAGLE', 'National bird of the USA')]:
                db.session.add(Word(subject_id=animals.id, word=w, hint=hint))
            for w, hint in [('PARIS', 'City of light'), ('LIMA', 'Capital of Peru'),
                            ('OSLO', 'Capital of Norway')]:
                db.session.add(Word(subject_id=capitals.id, word=w, hint=hint))

            # Seed players
            players = ['player1@example.com', 'player2@example.com', 'player3@example.com']
            for email in players:
                player = Player(email=email, display_name=email.split('@')[0])
                player.set_password('password')
                db.session.add(player)

            db.session.commit()
            print('Database has been reset and seeded!')

    from wordrank.services.auth.permissions import ROLES

    @click.command('create-admin')
    @click.argument('email')
    @click.argument('password')
    @click.option('--role', type=click.Choice(ROLES), default=None,
                  help='Role to grant. Leaves an existing role unchanged when omitted.')
    def create_admin_command(email, password, role):
        """Creates an admin account, or resets its password if it exists."""
        from wordrank import store
        with flask_app.app_context():
            admin_user = store.upsert_admin(email, password, role=role)
            print(f'Admin {admin_user.email} ({admin_user.role}) is ready.')

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(create_admin_command)

    return flask_app


def _register_error_handlers(flask_app):
    from wordrank.errors import WordrankError

    @flask_app.errorhandler(WordrankError)
    def handle_wordrank_error(exc):
        return jsonify({'error': exc.message}), exc.status_code

    @flask_app.errorhandler(HTTPException)
    def handle_http_error(exc):
        return jsonify({'error': exc.name}), exc.code

    @flask_app.errorhandler(Exception)
    def handle_unexpected_error(exc):
        flask_app.logger.exception(f"[unhandled] {exc.__class__.__name__}")
        return jsonify({'error': 'Internal server error'}), 500
