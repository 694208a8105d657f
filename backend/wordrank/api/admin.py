import hmac

from flask import Blueprint, current_app, jsonify, request

from wordrank import store
from wordrank.api import int_arg, json_body, require_fields
from wordrank.errors import AuthorizationFailure, NotFound, ValidationFailure
from wordrank.services.auth.audit import log_admin_action
from wordrank.services.auth.guard import admin_required, require_admin_permission
from wordrank.services.auth.principals import PrincipalKind
from wordrank.services.auth.resolver import clear_session_cookie, set_session_cookie
from wordrank.services.auth.tokens import issue_token, ttl_for

admin = Blueprint('admin', __name__)


# ---- Session ----

@admin.route('/login', methods=['POST'])
def admin_login():
    data = json_body()
    email, password = require_fields(data, 'email', 'password', message='Email and password are required')
    admin_user = store.find_admin_by_email(str(email))
    if not admin_user or not admin_user.check_password(str(password)):
        current_app.logger.info("[admin-login] rejected credentials")
        return jsonify({'error': 'Invalid credentials'}), 401

    token = issue_token(PrincipalKind.ADMIN, admin_user.id, ttl_for(PrincipalKind.ADMIN))
    # Also returned in the body for clients that send it as a bearer token.
    response = jsonify({'admin': admin_user.to_dict(), 'token': token})
    set_session_cookie(response, request, PrincipalKind.ADMIN, token)
    log_admin_action(admin_user.id, 'LOGIN', 'ADMIN_USER', admin_user.id)
    return response


@admin.route('/logout', methods=['POST'])
def admin_logout():
    response = jsonify({'success': True})
    clear_session_cookie(response, request, PrincipalKind.ADMIN)
    return response


@admin.route('/me', methods=['GET'])
@admin_required
def admin_me(principal):
    return jsonify({'admin': principal.to_dict()})


@admin.route('/setup', methods=['POST'])
def admin_setup():
    """One-time bootstrap of the first admin account.

    Only open while ADMIN_SETUP_KEY is configured and no admin exists yet.
    """
    setup_key = current_app.config.get('ADMIN_SETUP_KEY') or ''
    if not setup_key or store.count_admins() > 0:
        raise AuthorizationFailure('Admin setup is disabled')

    data = json_body()
    supplied = str(data.get('setup_key') or '')
    if not hmac.compare_digest(supplied.encode('utf-8'), setup_key.encode('utf-8')):
        current_app.logger.warning("[admin-setup] invalid setup key")
        raise AuthorizationFailure('Invalid setup key')

    email, password = require_fields(data, 'email', 'password', message='Email and password are required')
    min_length = int(current_app.config.get('MIN_PASSWORD_LENGTH', 6))
    if len(str(password)) < min_length:
        raise ValidationFailure(f'Password must be at least {min_length} characters')

    admin_user = store.upsert_admin(str(email), str(password), role='super_admin')
    current_app.logger.warning(f"[admin-setup] bootstrap admin={admin_user.id} created")
    log_admin_action(admin_user.id, 'CREATE', 'ADMIN_USER', admin_user.id, {'via': 'setup'})
    return jsonify({'message': 'Admin user created successfully', 'admin': admin_user.to_dict()}), 201


# ---- Players ----

@admin.route('/players', methods=['GET'])
@require_admin_permission('players', 'can_read')
def list_players(principal):
    args = request.args
    page = int_arg(args.get('page'), 'page', default=1, minimum=1)
    if args.get('limit') == 'all':
        limit = None
    else:
        limit = int_arg(args.get('limit'), 'limit', default=20, minimum=1,
                        maximum=int(current_app.config.get('ADMIN_PAGE_MAX_LIMIT', 100)))
    players, total = store.list_players(
        q=args.get('q'),
        page=page,
        limit=limit,
        sort_by=args.get('sort_by', 'created_at'),
        sort_order=args.get('sort_order', 'desc'),
    )
    return jsonify({
        'data': [p.to_dict() for p in players],
        'total': total,
        'page': page,
        'limit': limit if limit is not None else total,
    })


@admin.route('/players/<int:player_id>', methods=['GET'])
@require_admin_permission('players', 'can_read')
def get_player(principal, player_id):
    player = store.find_player_by_id(player_id)
    if not player:
        raise NotFound('Player not found')
    return jsonify(player.to_dict())


@admin.route('/players/<int:player_id>', methods=['DELETE'])
@require_admin_permission('players', 'can_delete')
def delete_player(principal, player_id):
    if not store.delete_player(player_id):
        raise NotFound('Player not found')
    log_admin_action(principal.id, 'DELETE', 'PLAYER', player_id)
    return jsonify({'success': True})


@admin.route('/players/<int:player_id>/status', methods=['PATCH'])
@require_admin_permission('players', 'can_update')
def update_player_status(principal, player_id):
    data = json_body()
    is_active = data.get('is_active')
    if not isinstance(is_active, bool):
        raise ValidationFailure('is_active must be a boolean')
    player = store.update_player_active(player_id, is_active)
    if not player:
        raise NotFound('Player not found')
    log_admin_action(principal.id, 'ACTIVATE' if is_active else 'DEACTIVATE', 'PLAYER', player_id,
                     {'is_active': is_active})
    return jsonify({'success': True, 'player': player.to_dict()})


# ---- Content ----

@admin.route('/words/<int:word_id>', methods=['DELETE'])
@require_admin_permission('words', 'can_delete')
def delete_word(principal, word_id):
    if not store.delete_word(word_id):
        raise NotFound('Word not found')
    log_admin_action(principal.id, 'DELETE', 'WORD', word_id)
    return jsonify({'success': True})


# ---- Audit ----

@admin.route('/audit-logs', methods=['GET'])
@require_admin_permission('admins', 'can_read')
def list_audit_logs(principal):
    args = request.args
    page = int_arg(args.get('page'), 'page', default=1, minimum=1)
    limit = int_arg(args.get('limit'), 'limit', default=50, minimum=1,
                    maximum=int(current_app.config.get('ADMIN_PAGE_MAX_LIMIT', 100)))
    admin_id = int_arg(args.get('admin_id'), 'admin_id', minimum=1)
    entries, total = store.list_admin_audit_logs(page=page, limit=limit, admin_id=admin_id,
                                                 action=args.get('action'))
    return jsonify({
        'data': [e.to_dict() for e in entries],
        'total': total,
        'page': page,
        'limit': limit,
    })
