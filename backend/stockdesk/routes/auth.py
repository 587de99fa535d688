from flask import Blueprint, request, abort, jsonify
from flask_jwt_extended import create_access_token, jwt_required, get_jwt, get_jwt_identity, set_access_cookies, unset_jwt_cookies
from sqlalchemy import select
from stockdesk import get_db
from stockdesk.constants.permissions import sanitize_permissions
from stockdesk.models.user import User
from stockdesk.services.policy import ordered_menu_items
from stockdesk.services.session import SessionUser, get_sessions, load_session_context

auth_bp = Blueprint('auth', __name__)


def session_user_for(user: User) -> SessionUser:
    return SessionUser(
        id=str(user.id),
        email=user.email,
        name=user.full_name or user.email,
        role=user.role,
        permissions=frozenset(sanitize_permissions(user.permissions)),
        business_id=user.business_id,
    )


def _me_payload(su: SessionUser):
    role = su.normalized_role
    return {
        'id': su.id,
        'name': su.name,
        'email': su.email,
        'role': su.role,
        'normalized_role': role.value,
        'permissions': sorted(su.permissions),
        'business_id': su.business_id,
        'menu': list(ordered_menu_items(role)),
    }


@auth_bp.post('/login')
def login():
    data = request.json or {}
    email = (data.get('email') or '').strip().lower(); password = data.get('password')
    if not email or not password:
        abort(400, description='email & password required')
    session = get_db()
    user = session.execute(select(User).where(User.email==email)).scalar_one_or_none()
    if not user or not user.is_active or not user.verify_password(password):
        abort(401, description='invalid credentials')
    su = session_user_for(user)
    # JWT identity must be a string (flask-jwt-extended v4 requirement)
    token = create_access_token(identity=su.id, additional_claims=su.to_claims())
    body = _me_payload(su)
    body['access_token'] = token
    resp = jsonify(body)
    set_access_cookies(resp, token)
    return resp


@auth_bp.post('/logout')
def logout():
    ctx = load_session_context()
    if ctx.user is not None:
        # invalidates any refresh still in flight for this user
        get_sessions().store_for(ctx.user.id).clear()
    resp = jsonify({'status': 'ok', 'redirect_to': '/'})
    unset_jwt_cookies(resp)
    return resp


@auth_bp.get('/me')
@jwt_required()
def me():
    return _me_payload(SessionUser.from_claims(get_jwt_identity(), get_jwt()))


@auth_bp.post('/refresh')
@jwt_required()
def refresh():
    """Re-issue the token from the stored user so role/permission edits take effect.

    Gates answer LOADING for this user until the refresh completes; a refresh that was
    overtaken by a newer one (or by logout) is rejected with 409.
    """
    user_id = str(get_jwt_identity())
    store = get_sessions().store_for(user_id)
    generation = store.begin_refresh()
    try:
        user = get_db().get(User, int(user_id))
    except Exception:
        store.complete_refresh(generation, None)
        raise
    su = session_user_for(user) if user and user.is_active else None
    if not store.complete_refresh(generation, su):
        abort(409, description='superseded by a newer session change')
    if su is None:
        abort(401, description='user no longer active')
    token = create_access_token(identity=su.id, additional_claims=su.to_claims())
    body = _me_payload(su)
    body['access_token'] = token
    resp = jsonify(body)
    set_access_cookies(resp, token)
    return resp
