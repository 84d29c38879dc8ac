"""
Services Package - Business Logic Layer

Services sit between routes and models. Routes resolve the caller, hand the
Principal to a service and render the (result, rejection) it returns.

Available Services:
- AuthService: Registration, login, token refresh and revocation
- AccountService: Account deletion through the ownership graph
- SubscriptionService: Subscription reads, cancel/resume, lifetime grants
- StudioService: Applications, casting calls and notes owned by a studio
- TalentService: Profile images, project invitations, external actor claims
- UserService: Account lookups for admins
"""

from casthub.services.auth_service import AuthService
from casthub.services.account_service import AccountService
from casthub.services.subscription_service import SubscriptionService
from casthub.services.studio_service import StudioService
from casthub.services.talent_service import TalentService
from casthub.services.user_service import UserService

__all__ = [
    'AuthService',
    'AccountService',
    'SubscriptionService',
    'StudioService',
    'TalentService',
    'UserService',
]
