"""Error types for calls to the inventory backend and their console-facing messages."""
from __future__ import annotations
from typing import Any, Dict, Optional

STATUS_MESSAGES = {
    401: 'Session expired. Please log in again.',
    403: 'You do not have permission to perform this action.',
    404: 'The requested resource was not found.',
}


class BackendError(Exception):
    def __init__(self, message: str, status: int = 502, code: str = 'API_ERROR', details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.details = details or {}

    @classmethod
    def from_payload(cls, status: int, payload: Any, fallback: str) -> 'BackendError':
        """Pull message/code/details out of an error body of unknown shape."""
        body = payload if isinstance(payload, dict) else {}
        nested = body.get('error') if isinstance(body.get('error'), dict) else {}
        message = body.get('message') or nested.get('detail') or nested.get('message') or fallback
        code = body.get('code') or nested.get('code') or 'API_ERROR'
        details = body.get('details') if isinstance(body.get('details'), dict) else {}
        return cls(str(message), status=status, code=str(code), details=details)


def describe_error(status: int, details: Optional[Dict[str, Any]] = None, fallback: str = 'An error occurred') -> str:
    if status in STATUS_MESSAGES:
        return STATUS_MESSAGES[status]
    if status == 422 and details:
        lines = []
        for field, errors in details.items():
            errs = errors if isinstance(errors, list) else [errors]
            lines.append(f"{field}: {', '.join(str(e) for e in errs)}")
        return '\n'.join(lines)
    return fallback

__all__ = ['BackendError', 'describe_error', 'STATUS_MESSAGES']
