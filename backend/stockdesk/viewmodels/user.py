from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Tuple
from stockdesk.constants.permissions import sanitize_permissions
from stockdesk.constants.roles import normalize_role
from stockdesk.viewmodels.customer import customer_display_name
from stockdesk.viewmodels.defaults import coerce_text, first_present
from stockdesk.viewmodels.formatting import avatar_color, initials


@dataclass(frozen=True)
class UserVM:
    id: str
    name: str
    email: str
    role: str
    permissions: Tuple[str, ...]
    is_active: bool
    initials: str
    avatar_color: str


def user_view(raw: Dict[str, Any]) -> UserVM:
    raw = raw if isinstance(raw, dict) else {}
    name = customer_display_name(raw)
    return UserVM(
        id=coerce_text(first_present(raw, ('id', '_id'))),
        name=name,
        email=coerce_text(raw.get('email')),
        role=normalize_role(raw.get('role')).value,
        permissions=tuple(sanitize_permissions(raw.get('permissions'))),
        is_active=bool(raw.get('isActive', True)),
        initials=initials(name),
        avatar_color=avatar_color(name),
    )
