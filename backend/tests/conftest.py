"""
Test Configuration and Fixtures

Key fixtures:
- app: Flask application with the testing config (SQLite in memory), tables
  created for each test and dropped afterwards
- client: Flask test client
- session: The Flask-SQLAlchemy session bound to the test app
- make_account: Factory creating a user with its tenant and studio/profile
- studio_user, other_studio_user, talent_user, admin_user, super_admin_user:
  Ready-made accounts
- studio_of, profile_of: Look up the Studio or Profile owned by an account
- auth_headers: Factory building Authorization headers for a user
- casting_setup: Studio project with a casting call and a pending application
- principal_for: Principal the session resolver would build for a user
"""

import pytest

from flask_jwt_extended import create_access_token
from sqlalchemy import event

from casthub import create_app
from casthub.extensions import db as _db
from casthub.models import (
    User,
    UserRole,
    Tenant,
    TenantType,
    Studio,
    Profile,
    Project,
    CastingCall,
    Application,
)
from casthub.services.auth_service import TOKEN_BLACKLIST
from casthub.services.session_service import Principal


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute('PRAGMA foreign_keys=ON')
    cursor.close()


@pytest.fixture(scope='function')
def app():
    """
    Create Flask application for testing.

    Scope: function - every test gets an empty database. SQLite enforces
    foreign keys only when asked to, so the pragma is set on every connection.
    """
    app = create_app('testing')

    with app.app_context():
        if _db.engine.dialect.name == 'sqlite':
            event.listen(_db.engine, 'connect', _enable_sqlite_foreign_keys)

        _db.create_all()
        TOKEN_BLACKLIST.clear()

        yield app

        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope='function')
def session(app):
    return _db.session


@pytest.fixture(scope='function')
def client(app):
    return app.test_client()


@pytest.fixture(scope='function')
def make_account(session):
    """
    Factory for accounts.

    Usage:
        user = make_account('casting@studio.com', TenantType.STUDIO)
        admin = make_account('root@casthub.io', role=UserRole.ADMIN)
    """
    def _make(email, tenant_type=None, role=UserRole.USER, first_name='Test', last_name='User',
              password='TestPass123'):
        user = User(
            email=email,
            first_name=first_name,
            last_name=last_name,
            role=role,
            is_active=True,
        )
        user.set_password(password)
        session.add(user)
        session.flush()

        if tenant_type:
            tenant = Tenant(tenant_type=tenant_type, name=f"{first_name} {last_name}")
            session.add(tenant)
            session.flush()

            if tenant_type == TenantType.STUDIO:
                session.add(Studio(tenant_id=tenant.id, name=f"{last_name} Studio"))
            else:
                session.add(Profile(user_id=user.id, tenant_id=tenant.id))

            user.tenant_id = tenant.id

        session.commit()
        return user

    return _make


@pytest.fixture(scope='function')
def studio_user(make_account):
    return make_account('studio@example.com', TenantType.STUDIO, last_name='North')


@pytest.fixture(scope='function')
def other_studio_user(make_account):
    return make_account('other-studio@example.com', TenantType.STUDIO, last_name='South')


@pytest.fixture(scope='function')
def talent_user(make_account):
    return make_account('talent@example.com', TenantType.TALENT, first_name='Ana', last_name='Lima')


@pytest.fixture(scope='function')
def admin_user(make_account):
    return make_account('admin@example.com', role=UserRole.ADMIN, first_name='Admin')


@pytest.fixture(scope='function')
def super_admin_user(make_account):
    return make_account('root@example.com', role=UserRole.SUPER_ADMIN, first_name='Root')


@pytest.fixture(scope='function')
def studio_of(session):
    """Studio owned by a STUDIO account."""
    return lambda user: Studio.query.filter_by(tenant_id=user.tenant_id).first()


@pytest.fixture(scope='function')
def profile_of(session):
    """Profile owned by a TALENT account."""
    return lambda user: Profile.query.filter_by(tenant_id=user.tenant_id).first()


@pytest.fixture(scope='function')
def auth_headers(app):
    """
    Factory for Authorization headers.

    Usage:
        client.get('/api/auth/session', headers=auth_headers(user))
    """
    def _headers(user):
        token = create_access_token(identity=user.id)
        return {'Authorization': f'Bearer {token}'}

    return _headers


@pytest.fixture(scope='function')
def casting_setup(session, studio_user, other_studio_user, talent_user, studio_of, profile_of):
    """
    A studio with a project, a casting call on it and one pending application
    from the talent, plus a casting call owned by another studio.

    Returns:
        dict of ids: studio_id, other_studio_id, profile_id, project_id,
        casting_call_id, other_casting_call_id, application_id
    """
    studio = studio_of(studio_user)
    other_studio = studio_of(other_studio_user)
    profile = profile_of(talent_user)

    project = Project(studio_id=studio.id, title='Harbor Lights')
    session.add(project)
    session.flush()

    casting_call = CastingCall(
        studio_id=studio.id,
        project_id=project.id,
        title='Lead Role',
    )
    other_casting_call = CastingCall(studio_id=other_studio.id, title='Extra')
    session.add_all([casting_call, other_casting_call])
    session.flush()

    application = Application(
        casting_call_id=casting_call.id,
        profile_id=profile.id,
        message='I would love to join',
    )
    session.add(application)
    session.commit()

    return {
        'studio_id': studio.id,
        'other_studio_id': other_studio.id,
        'profile_id': profile.id,
        'project_id': project.id,
        'casting_call_id': casting_call.id,
        'other_casting_call_id': other_casting_call.id,
        'application_id': application.id,
    }


@pytest.fixture(scope='function')
def principal_for(session):
    """Build the Principal the session resolver would produce for a user."""
    def _principal(user, token_id=None):
        tenant = session.get(Tenant, user.tenant_id) if user.tenant_id else None
        return Principal(
            user_id=user.id,
            email=user.email,
            role=user.role,
            tenant_id=user.tenant_id,
            tenant_type=tenant.tenant_type if tenant else None,
            token_id=token_id,
            first_name=user.first_name,
            last_name=user.last_name,
        )

    return _principal
