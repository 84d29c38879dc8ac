"""
Direct messages between studios and talent.

Exactly one sender column and one receiver column are set per row.
"""

from sqlalchemy import Column, String, Text, Boolean, ForeignKey

from casthub.extensions import db
from casthub.models.base import BaseModel


class Message(BaseModel, db.Model):
    __tablename__ = 'messages'

    subject = Column(String(255), nullable=True)
    content = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)

    talent_sender_id = Column(String(36), ForeignKey('profiles.id'), nullable=True, index=True)
    talent_receiver_id = Column(String(36), ForeignKey('profiles.id'), nullable=True, index=True)
    studio_sender_id = Column(String(36), ForeignKey('studios.id'), nullable=True, index=True)
    studio_receiver_id = Column(String(36), ForeignKey('studios.id'), nullable=True, index=True)
