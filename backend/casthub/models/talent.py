"""
Talent-side models: Profile and its ordered images.
"""

from sqlalchemy import Column, String, Boolean, Integer, Text, ForeignKey, JSON
from sqlalchemy.orm import relationship

from casthub.extensions import db
from casthub.models.base import BaseModel


class Profile(BaseModel, db.Model):
    """
    Talent profile, owned 1:1 by a TALENT tenant.

    Attributes:
        user_id: Account that owns the profile
        tenant_id: Owning tenant (unique)
        availability: Whether the talent is currently available for work
        skills: List of skill names
        location: Free-form location
    """

    __tablename__ = 'profiles'

    user_id = Column(String(36), ForeignKey('users.id'), nullable=False, index=True)
    tenant_id = Column(String(36), ForeignKey('tenants.id'), nullable=False, unique=True)
    bio = Column(Text, nullable=True)
    availability = Column(Boolean, default=True, nullable=False)
    skills = Column(JSON, nullable=False, default=list)
    location = Column(String(255), nullable=True)

    tenant = relationship('Tenant', back_populates='profile')
    user = relationship('User')
    images = relationship(
        'ProfileImage',
        back_populates='profile',
        order_by='ProfileImage.sort_order'
    )

    @property
    def primary_image(self):
        return next((image for image in self.images if image.is_primary), None)


class ProfileImage(BaseModel, db.Model):
    """Profile image. At most one image per profile has is_primary set."""

    __tablename__ = 'profile_images'

    profile_id = Column(String(36), ForeignKey('profiles.id'), nullable=False, index=True)
    url = Column(String(1024), nullable=False)
    is_primary = Column(Boolean, default=False, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)

    profile = relationship('Profile', back_populates='images')
