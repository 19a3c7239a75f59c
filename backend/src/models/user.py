"""User SQLAlchemy model"""

from sqlalchemy import Column, Integer, Text, Boolean, DateTime, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import validates
from sqlalchemy.sql import func
import re

from .base import Base


class User(Base):
    """Staff user of the CRM.

    Users appear in the audit trail as actors. Credentials live here but are
    managed outside this service.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    role = Column(Text, nullable=False, default="staff")
    password_hash = Column(Text, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    last_login_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    # Constraints
    __table_args__ = (
        CheckConstraint(
            "role IN ('admin', 'manager', 'staff')",
            name='ck_users_role'
        ),
        UniqueConstraint('username', name='uq_users_username'),
    )

    @validates('email')
    def validate_email(self, key, value):
        """Basic email format validation"""
        if not re.match(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$', value):
            raise ValueError("Invalid email format")
        return value.lower()
