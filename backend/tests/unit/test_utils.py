"""
Unit Tests for Utility Functions

Tests for utility modules including:
- responses.py: JSON response helpers
- errors.py: Rejection rendering
- decorators.py: Route protection decorators
- billing_client.py: Payment provider client
- cookies.py: Auth cookie clearing
"""

import pytest
from http import HTTPStatus

import stripe
from flask import g, make_response

from casthub.models import TenantType
from casthub.utils.billing_client import BillingClient
from casthub.utils.cookies import clear_auth_cookies
from casthub.utils.decorators import (
    admin_required,
    roles_required,
    session_required,
    super_admin_required,
    validate_json,
)
from casthub.utils.errors import Rejection, UpstreamError
from casthub.utils.responses import (
    success_response,
    error_response,
    ok,
    created,
    bad_request,
    not_found,
    internal_error,
)


class TestResponseHelpers:
    """Tests for response helper functions"""

    def test_success_response_with_data(self, app):
        response, status_code = success_response(data={'id': 1}, message='Application updated')

        assert status_code == 200
        assert response.get_json() == {
            'success': True,
            'message': 'Application updated',
            'data': {'id': 1},
        }

    def test_success_response_without_data(self, app):
        response, _ = ok()
        assert 'data' not in response.get_json()

    def test_created_helper(self, app):
        _, status_code = created({'id': 1})
        assert status_code == HTTPStatus.CREATED

    def test_error_response_with_details(self, app):
        response, status_code = error_response(
            'BAD_REQUEST',
            'Validation failed',
            {'status': ['Must be one of: PENDING, APPROVED, REJECTED.']},
        )

        assert status_code == 400
        data = response.get_json()
        assert data['success'] is False
        assert data['error']['code'] == 'BAD_REQUEST'
        assert data['error']['details']['status']

    def test_bad_request_without_details(self, app):
        response, _ = bad_request('Invalid input')
        assert 'details' not in response.get_json()['error']

    def test_not_found_helper(self, app):
        response, status_code = not_found('Casting call')

        assert status_code == 404
        assert response.get_json()['error']['message'] == 'Casting call not found'

    def test_internal_error_keeps_details_outside_production(self, app):
        response, status_code = internal_error('Failed to delete account', 'step projects failed')

        assert status_code == 500
        assert response.get_json()['error']['details'] == 'step projects failed'

    def test_internal_error_hides_details_in_production(self, app):
        app.config['ENVIRONMENT'] = 'production'

        response, _ = internal_error('Failed to delete account', 'step projects failed')

        error = response.get_json()['error']
        assert error['message'] == 'Failed to delete account'
        assert 'details' not in error


class TestRejection:

    def test_to_response(self, app):
        response, status_code = Rejection.forbidden('Not your casting call').to_response()

        assert status_code == HTTPStatus.FORBIDDEN
        assert response.get_json()['error'] == {
            'code': 'FORBIDDEN',
            'message': 'Not your casting call',
        }

    def test_validation_failed_carries_details(self, app):
        response, status_code = Rejection.validation_failed({'content': ['Required']}).to_response()

        assert status_code == HTTPStatus.BAD_REQUEST
        assert response.get_json()['error']['details'] == {'content': ['Required']}

    def test_internal_goes_through_internal_error(self, app):
        app.config['ENVIRONMENT'] = 'production'

        response, status_code = Rejection.internal(details='secret').to_response()

        assert status_code == HTTPStatus.INTERNAL_SERVER_ERROR
        assert 'details' not in response.get_json()['error']


@pytest.fixture
def protected_app(app):
    """App with a few throwaway routes behind the decorators."""

    @app.route('/_test/session')
    @session_required
    def _session():
        return ok({'user_id': g.user_id})

    @app.route('/_test/studio')
    @roles_required([TenantType.STUDIO])
    def _studio():
        return ok()

    @app.route('/_test/admin')
    @admin_required
    def _admin():
        return ok()

    @app.route('/_test/super-admin')
    @super_admin_required
    def _super_admin():
        return ok({'is_super_admin': g.principal.is_super_admin})

    @app.route('/_test/json', methods=['POST'])
    @validate_json(['content'])
    def _json():
        return ok()

    return app


class TestDecorators:

    def test_session_required(self, protected_app, client, auth_headers, studio_user):
        user_id = studio_user.id

        anonymous = client.get('/_test/session')
        signed_in = client.get('/_test/session', headers=auth_headers(studio_user))

        assert anonymous.status_code == 401
        assert signed_in.status_code == 200
        assert signed_in.get_json()['data']['user_id'] == user_id

    def test_roles_required(self, protected_app, client, auth_headers, studio_user, talent_user):
        studio_headers = auth_headers(studio_user)
        talent_headers = auth_headers(talent_user)

        assert client.get('/_test/studio', headers=studio_headers).status_code == 200
        assert client.get('/_test/studio', headers=talent_headers).status_code == 403

    def test_admin_required(self, protected_app, client, auth_headers, admin_user, studio_user):
        admin_headers = auth_headers(admin_user)
        studio_headers = auth_headers(studio_user)

        assert client.get('/_test/admin', headers=admin_headers).status_code == 200
        assert client.get('/_test/admin', headers=studio_headers).status_code == 403

    def test_super_admin_required(self, protected_app, client, auth_headers, admin_user,
                                  super_admin_user):
        admin = client.get('/_test/super-admin', headers=auth_headers(admin_user))
        super_admin = client.get('/_test/super-admin', headers=auth_headers(super_admin_user))
        super_admin_on_admin_route = client.get('/_test/admin', headers=auth_headers(super_admin_user))

        assert admin.status_code == 403
        assert super_admin.status_code == 200
        assert super_admin.get_json()['data']['is_super_admin'] is True
        assert super_admin_on_admin_route.status_code == 200

    def test_validate_json(self, protected_app, client):
        not_json = client.post('/_test/json', data='content')
        missing = client.post('/_test/json', json={'other': 1})
        valid = client.post('/_test/json', json={'content': 'Callback'})

        assert not_json.status_code == 400
        assert missing.get_json()['error']['details'] == {'missing_fields': ['content']}
        assert valid.status_code == 200


class TestBillingClient:

    @pytest.fixture
    def billing(self, app):
        client = BillingClient()
        client.init_app(app)
        return client

    @pytest.fixture
    def modify(self, mocker):
        return mocker.patch('casthub.utils.billing_client.stripe.Subscription.modify')

    def test_set_cancel_at_period_end(self, billing, modify):
        modify.return_value = {'id': 'sub_123', 'cancel_at_period_end': True}

        result = billing.set_cancel_at_period_end('sub_123', True)

        assert result['cancel_at_period_end'] is True
        modify.assert_called_once_with(
            'sub_123',
            cancel_at_period_end=True,
            api_key='sk_test_dummy',
        )

    def test_provider_error(self, billing, modify):
        modify.side_effect = stripe.InvalidRequestError(
            'No such subscription', 'id', http_status=404
        )

        with pytest.raises(UpstreamError) as exc_info:
            billing.set_cancel_at_period_end('sub_missing', False)

        assert exc_info.value.status_code == 404
        assert 'No such subscription' in str(exc_info.value)

    def test_network_error(self, billing, modify):
        modify.side_effect = stripe.APIConnectionError('connection refused')

        with pytest.raises(UpstreamError) as exc_info:
            billing.set_cancel_at_period_end('sub_123', True)

        assert exc_info.value.provider == 'stripe'
        assert exc_info.value.status_code is None

    def test_unconfigured(self, app, modify):
        app.config['STRIPE_SECRET_KEY'] = None
        billing = BillingClient()
        billing.init_app(app)

        assert billing.is_configured is False
        with pytest.raises(UpstreamError):
            billing.set_cancel_at_period_end('sub_123', True)
        modify.assert_not_called()

    def test_requests_transport(self, billing):
        assert isinstance(billing.http_client, stripe.RequestsClient)


class TestClearAuthCookies:

    def test_every_configured_cookie_expires(self, app):
        with app.test_request_context('/'):
            response = clear_auth_cookies(make_response('', 200))

        set_cookies = response.headers.getlist('Set-Cookie')
        for name in app.config['AUTH_COOKIES_TO_CLEAR']:
            header = next(value for value in set_cookies if value.startswith(f'{name}='))
            assert '1970' in header
