"""
Unit Tests for the account deletion graph

- Plan order: leaf to root, ties by declaration order
- Graph validation: unknown children and cycles
- Execution: studio and talent accounts, rows other users created under the
  studio, failure handling
"""

import pytest

from casthub.models import (
    User,
    Tenant,
    Studio,
    Profile,
    ProfileImage,
    Project,
    CastingCall,
    Application,
    ProjectMember,
    Scene,
    SceneTalent,
    Message,
    StudioNote,
    ExternalActor,
    ExternalActorProject,
    ExternalActorStatus,
)
from casthub.services.account_service import AccountService
from casthub.services.deletion_graph import (
    DELETION_NODES,
    DeletionNode,
    build_deletion_plan,
    execute_plan,
)
from casthub.services import deletion_graph
from casthub.utils.errors import CascadeStepError

_run_node = deletion_graph._run_node


def failing_at(step_name):
    """Side effect running every step for real except step_name."""
    def _run(node, clause):
        if node.name == step_name:
            raise RuntimeError('disk full')
        return _run_node(node, clause)
    return _run


class TestDeletionPlan:

    def test_plan_order(self):
        names = [node.name for node in build_deletion_plan()]

        assert names == [
            'profile_images',
            'applications',
            'scene_talents',
            'project_members',
            'project_invitations',
            'messages',
            'studio_notes',
            'casting_calls',
            'external_actor_projects',
            'scenes',
            'projects',
            'external_actors',
            'external_actor_links',
            'studio',
            'profile',
            'subscriptions',
            'tenant',
            'user',
        ]

    def test_every_child_runs_before_its_parent(self):
        position = {node.name: index for index, node in enumerate(build_deletion_plan())}

        for node in DELETION_NODES:
            for child in node.children:
                assert position[child] < position[node.name], f"{child} must precede {node.name}"

    def test_unknown_child_rejected(self):
        nodes = [DeletionNode('user', User, lambda ctx: None, children=('ghost',))]
        with pytest.raises(ValueError):
            build_deletion_plan(nodes)

    def test_cycle_rejected(self):
        nodes = [
            DeletionNode('a', User, lambda ctx: None, children=('b',)),
            DeletionNode('b', Tenant, lambda ctx: None, children=('a',)),
        ]
        with pytest.raises(ValueError):
            build_deletion_plan(nodes)


class TestExecutePlan:

    def test_studio_account_removes_owned_rows(self, casting_setup, studio_user, talent_user,
                                               session):
        studio_id = casting_setup['studio_id']
        project_id = casting_setup['project_id']
        scene = Scene(project_id=project_id, title='Opening')
        session.add(scene)
        session.flush()
        session.add_all([
            SceneTalent(scene_id=scene.id, profile_id=casting_setup['profile_id']),
            ProjectMember(project_id=project_id, profile_id=casting_setup['profile_id']),
            StudioNote(studio_id=studio_id, profile_id=casting_setup['profile_id'], content='Strong'),
            Message(content='Hello', studio_sender_id=studio_id,
                    talent_receiver_id=casting_setup['profile_id']),
        ])
        actor = ExternalActor(studio_id=studio_id, first_name='Walk', last_name='In')
        session.add(actor)
        session.flush()
        session.add(ExternalActorProject(external_actor_id=actor.id, project_id=project_id))
        session.commit()

        user_id = studio_user.id
        ctx = AccountService.build_context(studio_user)
        steps = dict(execute_plan(build_deletion_plan(), ctx))

        assert session.get(User, user_id) is None
        assert session.get(Studio, studio_id) is None
        assert Project.query.count() == 0
        assert CastingCall.query.filter_by(studio_id=studio_id).count() == 0
        assert Application.query.count() == 0
        assert Scene.query.count() == 0
        assert SceneTalent.query.count() == 0
        assert ProjectMember.query.count() == 0
        assert StudioNote.query.count() == 0
        assert Message.query.count() == 0
        assert ExternalActor.query.count() == 0
        assert ExternalActorProject.query.count() == 0
        assert steps['applications'] == 1
        assert steps['user'] == 1

        # The applicant and the other studio are untouched
        assert session.get(Profile, casting_setup['profile_id']) is not None
        assert session.get(CastingCall, casting_setup['other_casting_call_id']) is not None

    def test_talent_account_detaches_converted_actor(self, casting_setup, talent_user, session):
        profile_id = casting_setup['profile_id']
        session.add(ProfileImage(profile_id=profile_id, url='https://cdn.example.com/a.jpg'))
        actor = ExternalActor(
            studio_id=casting_setup['studio_id'],
            email='talent@example.com',
            status=ExternalActorStatus.CONVERTED,
            converted_profile_id=profile_id,
        )
        session.add(actor)
        session.commit()
        actor_id = actor.id
        tenant_id = talent_user.tenant_id

        execute_plan(build_deletion_plan(), AccountService.build_context(talent_user))

        assert session.get(Profile, profile_id) is None
        assert session.get(Tenant, tenant_id) is None
        assert ProfileImage.query.count() == 0
        assert Application.query.count() == 0
        remaining_actor = session.get(ExternalActor, actor_id)
        assert remaining_actor is not None
        assert remaining_actor.converted_profile_id is None
        # The studio's casting call survives its applicant
        assert session.get(CastingCall, casting_setup['casting_call_id']) is not None

    def test_steps_without_owner_are_skipped(self, make_account):
        user = make_account('loner@example.com')

        steps = execute_plan(build_deletion_plan(), AccountService.build_context(user))

        assert [name for name, _ in steps] == ['subscriptions', 'user']

    def test_failure_stops_walk_and_keeps_earlier_steps(self, casting_setup, studio_user,
                                                        session, mocker):
        ctx = AccountService.build_context(studio_user)
        plan = build_deletion_plan()
        mocker.patch(
            'casthub.services.deletion_graph._run_node',
            side_effect=failing_at('projects')
        )

        with pytest.raises(CascadeStepError) as exc_info:
            execute_plan(plan, ctx)

        assert exc_info.value.step == 'projects'
        assert Application.query.count() == 0
        assert CastingCall.query.filter_by(studio_id=ctx.studio_id).count() == 0
        assert session.get(Project, casting_setup['project_id']) is not None
        assert session.get(User, ctx.user_id) is not None

    def test_atomic_failure_rolls_back_everything(self, casting_setup, studio_user, session,
                                                  mocker):
        ctx = AccountService.build_context(studio_user)
        plan = build_deletion_plan()
        mocker.patch(
            'casthub.services.deletion_graph._run_node',
            side_effect=failing_at('studio')
        )

        with pytest.raises(CascadeStepError):
            execute_plan(plan, ctx, atomic=True)

        assert session.get(Application, casting_setup['application_id']) is not None
        assert session.get(CastingCall, casting_setup['casting_call_id']) is not None
