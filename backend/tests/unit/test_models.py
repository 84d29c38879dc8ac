"""
Unit Tests for Database Models

- User: password hashing, email normalization, serialization
- Tenant: type helpers and owned record
- Profile/ProfileImage: primary image lookup
- BaseModel helpers: update_from_dict, UTC normalization
"""

import pytest
from datetime import datetime, timezone, timedelta

from casthub.models import (
    User,
    UserRole,
    Tenant,
    TenantType,
    Studio,
    Profile,
    ProfileImage,
    as_utc,
)


class TestUserModel:
    """Tests for User model"""

    def test_create_user(self, session):
        user = User(first_name='John', last_name='Doe', email='john@example.com')
        user.set_password('password123')

        session.add(user)
        session.commit()

        assert user.id is not None
        assert len(user.id) == 36
        assert user.role == UserRole.USER
        assert user.is_active is True
        assert user.tenant_id is None
        assert user.created_at is not None

    def test_email_is_lowercased(self, session):
        user = User(email='  Jane.Doe@Example.COM ')
        session.add(user)
        session.commit()

        assert user.email == 'jane.doe@example.com'
        assert User.find_by_email('JANE.DOE@example.com').id == user.id

    def test_password_verification(self):
        user = User(email='test@example.com')
        user.set_password('correct_password1')

        assert user.password_hash != 'correct_password1'
        assert user.check_password('correct_password1') is True
        assert user.check_password('wrong_password1') is False

    def test_short_password_rejected(self):
        user = User(email='test@example.com')
        with pytest.raises(ValueError):
            user.set_password('short')

    def test_account_without_hash_never_matches(self):
        user = User(email='sso@example.com')
        assert user.check_password('anything123') is False

    def test_is_admin(self):
        assert User(email='a@x.io', role=UserRole.ADMIN).is_admin is True
        assert User(email='b@x.io', role=UserRole.SUPER_ADMIN).is_admin is True
        assert User(email='c@x.io', role=UserRole.USER).is_admin is False

    def test_to_dict_excludes_password_and_adds_tenant_type(self, studio_user):
        data = studio_user.to_dict()

        assert 'password_hash' not in data
        assert data['email'] == 'studio@example.com'
        assert data['tenant_type'] == TenantType.STUDIO
        assert data['created_at'].endswith('+00:00')

    def test_full_name(self):
        assert User(email='x@y.io', first_name='Ana', last_name='Lima').get_full_name() == 'Ana Lima'
        assert User(email='x@y.io', first_name='Ana').get_full_name() == 'Ana'


class TestTenantModel:

    def test_studio_tenant_owns_studio(self, studio_user, session):
        tenant = session.get(Tenant, studio_user.tenant_id)

        assert tenant.is_studio is True
        assert tenant.is_talent is False
        assert isinstance(tenant.owned_record(), Studio)
        assert tenant.profile is None

    def test_talent_tenant_owns_profile(self, talent_user, session):
        tenant = session.get(Tenant, talent_user.tenant_id)

        assert tenant.is_talent is True
        assert isinstance(tenant.owned_record(), Profile)
        assert tenant.studio is None


class TestProfileImages:

    def test_primary_image(self, talent_user, profile_of, session):
        profile = profile_of(talent_user)
        session.add_all([
            ProfileImage(profile_id=profile.id, url='https://cdn.example.com/1.jpg', sort_order=1),
            ProfileImage(profile_id=profile.id, url='https://cdn.example.com/0.jpg', sort_order=0,
                         is_primary=True),
        ])
        session.commit()
        session.refresh(profile)

        assert [image.sort_order for image in profile.images] == [0, 1]
        assert profile.primary_image.url == 'https://cdn.example.com/0.jpg'

    def test_no_primary_image(self, talent_user, profile_of):
        assert profile_of(talent_user).primary_image is None


class TestBaseModel:

    def test_update_from_dict_only_applies_allowed_fields(self):
        studio = Studio(name='Old', description='Old description')

        updated = studio.update_from_dict(
            {'name': 'New', 'tenant_id': 'forged', 'unknown': 1},
            ['name', 'description']
        )

        assert updated == ['name']
        assert studio.name == 'New'
        assert studio.tenant_id is None

    def test_as_utc(self):
        naive = datetime(2030, 1, 1, 12, 0)
        assert as_utc(naive).tzinfo == timezone.utc

        paris = datetime(2030, 1, 1, 13, 0, tzinfo=timezone(timedelta(hours=1)))
        assert as_utc(paris).hour == 12

        assert as_utc(None) is None
