from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict
from stockdesk.viewmodels.defaults import coerce_count, coerce_text, first_present, first_text


@dataclass(frozen=True)
class MessageVM:
    id: str
    subject: str
    body: str
    type: str
    status: str
    created_at: str
    recipient_count: int
    success_count: int
    failure_count: int


def message_view(raw: Dict[str, Any]) -> MessageVM:
    raw = raw if isinstance(raw, dict) else {}
    msg_type = first_text(raw, ('type', 'channel'), default='EMAIL').upper()
    return MessageVM(
        id=coerce_text(first_present(raw, ('id', '_id'))),
        subject=first_text(raw, ('subject', 'title'), default='(no subject)'),
        body=first_text(raw, ('body', 'content', 'message')),
        type=msg_type,
        status=first_text(raw, ('status',), default='sent').lower(),
        created_at=first_text(raw, ('createdAt', 'sentAt', 'date')),
        recipient_count=coerce_count(first_present(raw, ('recipientCount', 'recipients_count'))),
        success_count=coerce_count(first_present(raw, ('successCount', 'delivered'))),
        failure_count=coerce_count(first_present(raw, ('failureCount', 'failed'))),
    )
