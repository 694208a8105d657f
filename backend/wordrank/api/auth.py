from flask import Blueprint, current_app, jsonify, request

from wordrank import store
from wordrank.api import json_body, require_fields
from wordrank.errors import ValidationFailure
from wordrank.services.auth.guard import player_required
from wordrank.services.auth.principals import PrincipalKind
from wordrank.services.auth.resolver import clear_session_cookie, start_session

auth = Blueprint('auth', __name__)

# Column widths on the player table
EMAIL_MAX_LENGTH = 255
DISPLAY_NAME_MAX_LENGTH = 64


@auth.route('/signup', methods=['POST'])
def signup():
    data = json_body()
    email, password = require_fields(data, 'email', 'password', message='Email and password are required')
    if not isinstance(email, str) or not isinstance(password, str):
        raise ValidationFailure('Email and password must be strings')
    email = email.strip()
    if '@' not in email or len(email) > EMAIL_MAX_LENGTH:
        raise ValidationFailure('A valid email is required')
    min_length = int(current_app.config.get('MIN_PASSWORD_LENGTH', 6))
    if len(password) < min_length:
        raise ValidationFailure(f'Password must be at least {min_length} characters')

    display_name = data.get('display_name')
    if display_name is not None:
        if not isinstance(display_name, str):
            raise ValidationFailure('display_name must be a string')
        display_name = display_name.strip()
        if len(display_name) > DISPLAY_NAME_MAX_LENGTH:
            raise ValidationFailure(f'display_name must be at most {DISPLAY_NAME_MAX_LENGTH} characters')

    player = store.create_player(email, password, display_name=display_name)
    current_app.logger.info(f"[auth-signup] player={player.id}")

    response = jsonify({'player': player.to_dict()})
    start_session(response, request, PrincipalKind.PLAYER, player.id)
    return response, 201


@auth.route('/login', methods=['POST'])
def login():
    data = json_body()
    email, password = require_fields(data, 'email', 'password', message='Email and password are required')
    player = store.find_player_by_email(str(email))
    if not player or not player.check_password(str(password)):
        return jsonify({'error': 'Invalid credentials'}), 401
    if not player.is_active:
        current_app.logger.info(f"[auth-login] rejected inactive player={player.id}")
        return jsonify({'error': 'Invalid credentials'}), 401

    response = jsonify({'player': player.to_dict()})
    start_session(response, request, PrincipalKind.PLAYER, player.id)
    current_app.logger.info(f"[auth-login] player={player.id}")
    return response


@auth.route('/logout', methods=['POST'])
def logout():
    response = jsonify({'success': True})
    clear_session_cookie(response, request, PrincipalKind.PLAYER)
    return response


@auth.route('/me', methods=['GET'])
@player_required
def me(principal):
    player = store.find_player_by_id(principal.id)
    if player is None:
        return jsonify({'error': 'Unauthorized'}), 401
    return jsonify({'player': player.to_dict()})
