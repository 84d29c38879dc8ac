"""
Payment provider client.

Wraps the Stripe SDK. Only the calls the backend needs are exposed:
toggling cancel-at-period-end on a subscription.
"""

import logging
from typing import Any, Optional

import requests
import stripe

from casthub.utils.errors import UpstreamError

logger = logging.getLogger(__name__)


class BillingClient:
    """
    Stripe client, bound to the app in the factory.

    Usage:
        billing_client.init_app(app)
        billing_client.set_cancel_at_period_end('sub_123', True)
    """

    PROVIDER = 'stripe'

    def __init__(self):
        self.api_key: Optional[str] = None
        self.api_base: Optional[str] = None
        self.timeout: int = 10
        self.http_client: Optional[stripe.HTTPClient] = None

    def init_app(self, app):
        self.api_key = app.config.get('STRIPE_SECRET_KEY')
        self.api_base = app.config.get('STRIPE_API_BASE') or None
        self.timeout = int(app.config.get('BILLING_TIMEOUT', self.timeout))
        self.http_client = stripe.RequestsClient(timeout=self.timeout, session=requests.Session())

        if self.api_base:
            stripe.api_base = self.api_base.rstrip('/')
        stripe.default_http_client = self.http_client

        if not self.api_key:
            logger.warning("STRIPE_SECRET_KEY not configured. Billing calls will fail.")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.http_client)

    def set_cancel_at_period_end(self, stripe_subscription_id: str, cancel: bool) -> Any:
        """
        Schedule or unschedule cancellation at the end of the current period.

        Raises:
            UpstreamError: The provider rejected the call or was unreachable
        """
        if not self.is_configured:
            raise UpstreamError(self.PROVIDER, 'Billing client is not configured')

        logger.info(
            f"Setting cancel_at_period_end={cancel} on subscription {stripe_subscription_id}"
        )
        try:
            return stripe.Subscription.modify(
                stripe_subscription_id,
                cancel_at_period_end=cancel,
                api_key=self.api_key,
            )
        except stripe.StripeError as e:
            message = e.user_message or str(e)
            logger.error(
                f"Stripe update of {stripe_subscription_id} failed "
                f"({e.http_status}): {message}"
            )
            raise UpstreamError(self.PROVIDER, message, e.http_status) from e


billing_client = BillingClient()
