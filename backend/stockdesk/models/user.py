from __future__ import annotations
from sqlalchemy.orm import declarative_base, Mapped, mapped_column
from sqlalchemy import String, Integer, Boolean, JSON, DateTime, text
from typing import Any, Dict, List, Optional

Base = declarative_base()


class User(Base):
    """Console user. Owns the raw role string and the explicit permission list."""
    __tablename__ = 'users'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    first_name: Mapped[str] = mapped_column(String(64), default='')
    last_name: Mapped[str] = mapped_column(String(64), default='')
    email: Mapped[str] = mapped_column(String(128), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    # stored as entered (legacy titles allowed); normalized on read
    role: Mapped[str] = mapped_column(String(32), default='Sales', nullable=False)
    permissions: Mapped[List[str]] = mapped_column(JSON, default=list)
    business_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=text('CURRENT_TIMESTAMP'), server_onupdate=text('CURRENT_TIMESTAMP'))

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    def set_password(self, raw: str):
        from werkzeug.security import generate_password_hash
        self.password_hash = generate_password_hash(raw)

    def verify_password(self, raw: str) -> bool:
        from werkzeug.security import check_password_hash
        return check_password_hash(self.password_hash, raw)

    def to_record(self) -> Dict[str, Any]:
        """Shape matching the backend's user payloads so the same mappers apply."""
        return {
            'id': self.id,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'email': self.email,
            'role': self.role,
            'permissions': list(self.permissions or []),
            'businessId': self.business_id,
            'isActive': self.is_active,
        }
