"""
Append-only record of privileged actions.

admin_id and target_id are plain strings rather than foreign keys so entries
survive deletion of the accounts they mention.
"""

from sqlalchemy import Column, String, JSON

from casthub.extensions import db
from casthub.models.base import BaseModel


class AuditLog(BaseModel, db.Model):
    __tablename__ = 'audit_logs'

    action = Column(String(100), nullable=False, index=True)
    admin_id = Column(String(36), nullable=False, index=True)
    target_id = Column(String(36), nullable=True, index=True)
    details = Column(JSON, nullable=False, default=dict)
    ip_address = Column(String(100), nullable=True)
    user_agent = Column(String(512), nullable=True)
