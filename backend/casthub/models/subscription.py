"""
Subscription plans and per-user subscriptions.

Subscription rows mirror state held by the payment provider
(stripe_subscription_id). Lifetime access has no native representation and is
stored as an ACTIVE subscription whose period ends far in the future.
"""

from sqlalchemy import (
    Column, String, Text, Boolean, Float, DateTime, ForeignKey, JSON, CheckConstraint
)
from sqlalchemy.orm import relationship

from casthub.extensions import db
from casthub.models.base import BaseModel


class SubscriptionStatus:
    ACTIVE = 'ACTIVE'
    TRIALING = 'TRIALING'
    PAST_DUE = 'PAST_DUE'
    CANCELED = 'CANCELED'

    ALL = (ACTIVE, TRIALING, PAST_DUE, CANCELED)
    LIVE = (ACTIVE, TRIALING)


class SubscriptionPlan(BaseModel, db.Model):
    __tablename__ = 'subscription_plans'

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False, default=0)
    interval = Column(String(20), nullable=False, default='month')
    features = Column(JSON, nullable=False, default=list)
    is_active = Column(Boolean, default=True, nullable=False)


class Subscription(BaseModel, db.Model):
    __tablename__ = 'subscriptions'

    user_id = Column(String(36), ForeignKey('users.id'), nullable=False, index=True)
    plan_id = Column(String(36), ForeignKey('subscription_plans.id'), nullable=False)
    status = Column(String(20), nullable=False, default=SubscriptionStatus.ACTIVE)
    current_period_start = Column(DateTime(timezone=True), nullable=True)
    current_period_end = Column(DateTime(timezone=True), nullable=True)
    cancel_at_period_end = Column(Boolean, default=False, nullable=False)
    canceled_at = Column(DateTime(timezone=True), nullable=True)
    stripe_subscription_id = Column(String(255), nullable=True, unique=True)

    plan = relationship('SubscriptionPlan', lazy='joined')

    __table_args__ = (
        CheckConstraint(
            "status IN ('ACTIVE', 'TRIALING', 'PAST_DUE', 'CANCELED')",
            name='check_subscription_status'
        ),
    )

    def to_dict(self, exclude=None) -> dict:
        data = super().to_dict(exclude=exclude)
        data['plan'] = self.plan.to_dict() if self.plan else None
        return data
