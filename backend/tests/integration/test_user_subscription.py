"""
Integration Tests for the caller's subscription

- GET /api/user/subscription
- POST /api/user/subscription/cancel and /resume, with the payment provider mocked
"""

import pytest

from casthub.models import Subscription, SubscriptionPlan, SubscriptionStatus
from casthub.utils.errors import UpstreamError


@pytest.fixture
def live_subscription(session, talent_user):
    plan = SubscriptionPlan(name='Pro', price=29, interval='month')
    session.add(plan)
    session.flush()
    subscription = Subscription(
        user_id=talent_user.id,
        plan_id=plan.id,
        status=SubscriptionStatus.ACTIVE,
        stripe_subscription_id='sub_123',
    )
    session.add(subscription)
    session.commit()
    return subscription.id


class TestUserSubscription:

    def test_get_subscription(self, client, talent_user, auth_headers, live_subscription):
        response = client.get('/api/user/subscription', headers=auth_headers(talent_user))

        assert response.status_code == 200
        subscription = response.get_json()['data']['subscription']
        assert subscription['id'] == live_subscription
        assert subscription['plan']['name'] == 'Pro'

    def test_get_without_subscription(self, client, studio_user, auth_headers):
        response = client.get('/api/user/subscription', headers=auth_headers(studio_user))
        assert response.get_json()['data']['subscription'] is None

    def test_cancel(self, client, talent_user, auth_headers, live_subscription, mocker):
        set_cancel = mocker.patch(
            'casthub.services.subscription_service.billing_client.set_cancel_at_period_end'
        )

        response = client.post('/api/user/subscription/cancel', headers=auth_headers(talent_user))

        assert response.status_code == 200
        assert response.get_json()['data']['subscription']['cancel_at_period_end'] is True
        set_cancel.assert_called_once_with('sub_123', True)

    def test_resume(self, client, talent_user, auth_headers, live_subscription, mocker):
        mocker.patch('casthub.services.subscription_service.billing_client.set_cancel_at_period_end')

        response = client.post('/api/user/subscription/resume', headers=auth_headers(talent_user))

        assert response.status_code == 200
        assert response.get_json()['data']['subscription']['cancel_at_period_end'] is False

    def test_provider_failure(self, client, talent_user, auth_headers, live_subscription, mocker):
        mocker.patch(
            'casthub.services.subscription_service.billing_client.set_cancel_at_period_end',
            side_effect=UpstreamError('stripe', 'No such subscription', 404)
        )

        response = client.post('/api/user/subscription/cancel', headers=auth_headers(talent_user))

        assert response.status_code == 500
        assert response.get_json()['error']['message'] == 'Failed to cancel subscription'

    def test_cancel_without_subscription(self, client, studio_user, auth_headers):
        response = client.post('/api/user/subscription/cancel', headers=auth_headers(studio_user))

        assert response.status_code == 404
        assert response.get_json()['error']['message'] == 'No active subscription found'
