"""
Integration Tests for Studio Operations

Tests the studio API end to end:
- Application review, including adding the applicant to the project
- Casting call read/update/delete with ownership enforcement
- Studio notes
- Rejection precedence: 401, then 403, then 400
"""

from casthub.models import (
    Application,
    ApplicationStatus,
    CastingCall,
    ProjectMember,
    StudioNote,
)


class TestApplicationReview:

    def test_approve_and_add_to_project(self, client, casting_setup, studio_user, auth_headers):
        # Arrange
        headers = auth_headers(studio_user)
        application_id = casting_setup['application_id']
        payload = {'status': 'APPROVED', 'message': 'Welcome aboard', 'addToProject': True}

        # Act
        response = client.patch(f'/api/studio/applications/{application_id}', headers=headers,
                                json=payload)
        repeat = client.patch(f'/api/studio/applications/{application_id}', headers=headers,
                              json=payload)

        # Assert
        assert response.status_code == 200
        assert repeat.status_code == 200
        data = response.get_json()['data']
        assert data['status'] == ApplicationStatus.APPROVED
        assert data['message'] == 'Welcome aboard'
        assert data['casting_call']['title'] == 'Lead Role'

        members = ProjectMember.query.filter_by(project_id=casting_setup['project_id']).all()
        assert len(members) == 1
        assert members[0].profile_id == casting_setup['profile_id']

    def test_get_application(self, client, casting_setup, studio_user, auth_headers):
        application_id = casting_setup['application_id']

        response = client.get(f'/api/studio/applications/{application_id}',
                              headers=auth_headers(studio_user))

        assert response.status_code == 200
        assert response.get_json()['data']['status'] == ApplicationStatus.PENDING

    def test_invalid_status(self, client, casting_setup, studio_user, auth_headers):
        application_id = casting_setup['application_id']

        response = client.patch(f'/api/studio/applications/{application_id}',
                                headers=auth_headers(studio_user), json={'status': 'MAYBE'})

        assert response.status_code == 400
        error = response.get_json()['error']
        assert error['code'] == 'BAD_REQUEST'
        assert 'status' in error['details']

    def test_other_studio_gets_403_before_validation(self, client, casting_setup,
                                                     other_studio_user, auth_headers):
        application_id = casting_setup['application_id']

        response = client.patch(f'/api/studio/applications/{application_id}',
                                headers=auth_headers(other_studio_user), json={'status': 'MAYBE'})

        assert response.status_code == 403
        assert Application.query.one().status == ApplicationStatus.PENDING

    def test_talent_is_forbidden(self, client, casting_setup, talent_user, auth_headers):
        application_id = casting_setup['application_id']

        response = client.patch(f'/api/studio/applications/{application_id}',
                                headers=auth_headers(talent_user), json={'status': 'APPROVED'})

        assert response.status_code == 403

    def test_unauthenticated(self, client, casting_setup):
        application_id = casting_setup['application_id']

        response = client.patch(f'/api/studio/applications/{application_id}',
                                json={'status': 'MAYBE'})

        assert response.status_code == 401

    def test_unknown_application(self, client, casting_setup, studio_user, auth_headers):
        response = client.patch('/api/studio/applications/missing',
                                headers=auth_headers(studio_user), json={'status': 'APPROVED'})
        assert response.status_code == 404


class TestCastingCalls:

    def test_update_own_casting_call(self, client, casting_setup, studio_user, auth_headers):
        casting_call_id = casting_setup['casting_call_id']

        response = client.patch(f'/api/studio/casting-calls/{casting_call_id}',
                                headers=auth_headers(studio_user),
                                json={'title': 'Lead Role (Revised)', 'status': 'CLOSED'})

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['title'] == 'Lead Role (Revised)'
        assert data['status'] == 'CLOSED'

    def test_foreign_casting_call_is_not_modified(self, client, casting_setup, studio_user,
                                                  auth_headers, session):
        """PATCH on another studio's casting call is refused and leaves it untouched"""
        casting_call_id = casting_setup['other_casting_call_id']

        response = client.patch(f'/api/studio/casting-calls/{casting_call_id}',
                                headers=auth_headers(studio_user), json={'title': 'Hijacked'})

        assert response.status_code == 403
        session.expire_all()
        assert session.get(CastingCall, casting_call_id).title == 'Extra'

    def test_admin_reads_any_casting_call(self, client, casting_setup, admin_user, auth_headers):
        casting_call_id = casting_setup['other_casting_call_id']

        response = client.get(f'/api/studio/casting-calls/{casting_call_id}',
                              headers=auth_headers(admin_user))

        assert response.status_code == 200
        assert response.get_json()['data']['title'] == 'Extra'

    def test_delete_casting_call(self, client, casting_setup, studio_user, auth_headers, session):
        casting_call_id = casting_setup['casting_call_id']

        response = client.delete(f'/api/studio/casting-calls/{casting_call_id}',
                                 headers=auth_headers(studio_user))

        assert response.status_code == 200
        assert session.get(CastingCall, casting_call_id) is None
        assert Application.query.count() == 0

    def test_delete_foreign_casting_call(self, client, casting_setup, other_studio_user,
                                         auth_headers, session):
        casting_call_id = casting_setup['casting_call_id']

        response = client.delete(f'/api/studio/casting-calls/{casting_call_id}',
                                 headers=auth_headers(other_studio_user))

        assert response.status_code == 403
        assert session.get(CastingCall, casting_call_id) is not None


class TestNotes:

    def test_update_and_delete_note(self, client, casting_setup, studio_user, auth_headers,
                                    session):
        note = StudioNote(
            studio_id=casting_setup['studio_id'],
            profile_id=casting_setup['profile_id'],
            content='Strong audition',
        )
        session.add(note)
        session.commit()
        note_id = note.id
        headers = auth_headers(studio_user)

        updated = client.put(f'/api/studio/notes/{note_id}', headers=headers,
                             json={'content': 'Callback on Monday'})
        invalid = client.put(f'/api/studio/notes/{note_id}', headers=headers, json={})
        deleted = client.delete(f'/api/studio/notes/{note_id}', headers=headers)

        assert updated.status_code == 200
        assert updated.get_json()['data']['content'] == 'Callback on Monday'
        assert invalid.status_code == 400
        assert deleted.status_code == 200
        assert session.get(StudioNote, note_id) is None
