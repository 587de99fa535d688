from flask import Blueprint
from stockdesk.constants.roles import Role
from stockdesk.decorators.auth import role_route
from stockdesk.services.fetching import fetch
from stockdesk.utils.listing import list_response, to_json
from stockdesk.utils.normalize import extract_list, extract_messages, extract_single
from stockdesk.viewmodels.customer import customer_view
from stockdesk.viewmodels.message import message_view

msg_bp = Blueprint('messaging', __name__)


@msg_bp.get('')
@role_route(Role.CEO, Role.MANAGER)
def list_messages():
    result = fetch('messages', 'list_messages')
    rows = [message_view(r) for r in extract_messages(result.payload)]
    return list_response(rows, search_fields=('subject', 'body'), sortable=('created_at', 'subject', 'recipient_count'), extra=result.meta)


@msg_bp.get('/<message_id>')
@role_route(Role.CEO, Role.MANAGER)
def get_message(message_id):
    payload = fetch('message', 'get_message', message_id).payload
    raw = extract_single(payload, 'message')
    # recipients ride along either on the message or beside it in the envelope
    recipients = extract_list(raw, 'recipients') if 'recipients' in raw else extract_list(payload, 'recipients')
    body = to_json(message_view(raw))
    body['recipients'] = [
        dict(to_json(customer_view(r)), delivery_status=str(r.get('status') or 'pending').lower())
        for r in recipients if isinstance(r, dict)
    ]
    return body
