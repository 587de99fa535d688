from flask import Blueprint, request, abort
from sqlalchemy import select
from stockdesk import get_db
from stockdesk.constants.permissions import (
    PERMISSION_PRESETS,
    category_state,
    category_keys,
    sanitize_permissions,
    toggle_category,
    toggle_permission,
)
from stockdesk.constants.roles import Role, can_manage_users, normalize_role
from stockdesk.decorators.auth import role_route
from stockdesk.services.session import load_session_context
from stockdesk.models.user import User
from stockdesk.utils.listing import list_response, to_json
from stockdesk.viewmodels.user import user_view

users_bp = Blueprint('users', __name__)


def _get_user_or_404(user_id: int) -> User:
    user = get_db().get(User, user_id)
    if not user:
        abort(404, description='User not found')
    return user


def _editor_payload(user: User, selection):
    return {
        'user': {'id': user.id, 'name': user.full_name or user.email},
        'permissions': list(selection),
        'groups': category_state(selection),
    }


@users_bp.get('')
@role_route(Role.CEO, Role.MANAGER)
def list_users():
    session = get_db()
    users = session.execute(select(User).order_by(User.id.asc())).scalars().all()
    rows = [user_view(u.to_record()) for u in users]
    return list_response(
        rows,
        search_fields=('name', 'email'),
        sortable=('name', 'email', 'role'),
        extra={'can_manage': can_manage_users(load_session_context().role)},
    )


@users_bp.get('/new')
@role_route(Role.CEO)
def new_user_form():
    role = normalize_role(request.args.get('role') or Role.SALES.value)
    preset = PERMISSION_PRESETS[role.value]
    return {
        'roles': [r.value for r in Role],
        'role': role.value,
        'permissions': preset,
        'groups': category_state(preset),
    }


@users_bp.post('')
@role_route(Role.CEO)
def create_user():
    data = request.json or {}
    email = (data.get('email') or '').strip().lower()
    password = data.get('password')
    if not email or not password:
        abort(400, description='email & password required')
    session = get_db()
    if session.execute(select(User).where(User.email==email)).scalar_one_or_none():
        abort(409, description='email already registered')
    role = normalize_role(data.get('role'))
    perms = data.get('permissions')
    user = User(
        first_name=(data.get('firstName') or '').strip(),
        last_name=(data.get('lastName') or '').strip(),
        email=email,
        password_hash='',
        role=role.value,
        permissions=sanitize_permissions(perms if perms is not None else PERMISSION_PRESETS[role.value]),
        business_id=data.get('businessId'),
    )
    user.set_password(password)
    session.add(user)
    session.commit()
    return to_json(user_view(user.to_record())), 201


@users_bp.get('/<int:user_id>/permissions')
@role_route(Role.CEO)
def get_user_permissions(user_id):
    user = _get_user_or_404(user_id)
    return _editor_payload(user, sanitize_permissions(user.permissions))


@users_bp.put('/<int:user_id>/permissions')
@role_route(Role.CEO)
def replace_user_permissions(user_id):
    data = request.json or {}
    if not isinstance(data.get('permissions'), list):
        abort(400, description='permissions must be a list')
    user = _get_user_or_404(user_id)
    user.permissions = sanitize_permissions(data['permissions'])
    get_db().commit()
    return _editor_payload(user, user.permissions)


@users_bp.post('/<int:user_id>/permissions/toggle')
@role_route(Role.CEO)
def toggle_user_permissions(user_id):
    """Apply one editor toggle to the posted selection (or the stored one) without saving."""
    data = request.json or {}
    user = _get_user_or_404(user_id)
    selection = sanitize_permissions(data['selection']) if 'selection' in data else sanitize_permissions(user.permissions)
    if data.get('category'):
        if not category_keys(data['category']):
            abort(400, description='unknown category')
        selection = toggle_category(selection, data['category'])
    elif data.get('key'):
        if not sanitize_permissions([data['key']]):
            abort(400, description='unknown permission key')
        selection = toggle_permission(selection, data['key'])
    else:
        abort(400, description='category or key required')
    return _editor_payload(user, selection)
