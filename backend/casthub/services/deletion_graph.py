"""
Static ownership graph used to delete an account and everything it owns.

The store does not cascade, so rows must be removed leaf to root. Each node
names a table, how the rows belonging to the account are selected, and which
nodes must be cleared before it. The plan is a topological walk of the graph;
ties go to the node declared first, which yields:

    profile_images, applications, scene_talents, project_members,
    project_invitations, messages, studio_notes, casting_calls,
    external_actor_projects, scenes, projects, external_actors,
    external_actor_links, studio, profile, subscriptions, tenant, user
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from sqlalchemy import delete, update, select, or_

from casthub.extensions import db
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
    ProjectInvitation,
    Scene,
    SceneTalent,
    Message,
    StudioNote,
    ExternalActor,
    ExternalActorProject,
    Subscription,
)
from casthub.utils.errors import CascadeStepError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeletionContext:
    """Ids of the account being deleted. studio_id/profile_id are None when absent."""

    user_id: str
    tenant_id: Optional[str] = None
    studio_id: Optional[str] = None
    profile_id: Optional[str] = None


@dataclass(frozen=True)
class DeletionNode:
    """
    One step of the cascade.

    select(ctx) returns a WHERE clause for the rows to remove, or None when
    the account owns nothing in this table. With action 'detach' the rows
    are kept and detach_column is cleared instead.
    """

    name: str
    model: type
    select: Callable[[DeletionContext], Optional[object]]
    children: Tuple[str, ...] = ()
    action: str = 'delete'
    detach_column: Optional[str] = None


def _any_of(*clauses):
    clauses = [clause for clause in clauses if clause is not None]
    if not clauses:
        return None
    return clauses[0] if len(clauses) == 1 else or_(*clauses)


def _when(value, clause_factory):
    return clause_factory(value) if value else None


def _studio_projects(ctx: DeletionContext):
    return select(Project.id).where(Project.studio_id == ctx.studio_id)


def _studio_casting_calls(ctx: DeletionContext):
    return select(CastingCall.id).where(CastingCall.studio_id == ctx.studio_id)


def _studio_scenes(ctx: DeletionContext):
    return select(Scene.id).where(Scene.project_id.in_(_studio_projects(ctx)))


def _studio_external_actors(ctx: DeletionContext):
    return select(ExternalActor.id).where(ExternalActor.studio_id == ctx.studio_id)


DELETION_NODES: List[DeletionNode] = [
    DeletionNode(
        'profile_images', ProfileImage,
        lambda ctx: _when(ctx.profile_id, lambda pid: ProfileImage.profile_id == pid),
    ),
    DeletionNode(
        'applications', Application,
        lambda ctx: _any_of(
            _when(ctx.profile_id, lambda pid: Application.profile_id == pid),
            _when(ctx.studio_id, lambda _: Application.casting_call_id.in_(_studio_casting_calls(ctx))),
        ),
    ),
    DeletionNode(
        'scene_talents', SceneTalent,
        lambda ctx: _any_of(
            _when(ctx.profile_id, lambda pid: SceneTalent.profile_id == pid),
            _when(ctx.studio_id, lambda _: SceneTalent.scene_id.in_(_studio_scenes(ctx))),
        ),
    ),
    DeletionNode(
        'project_members', ProjectMember,
        lambda ctx: _any_of(
            _when(ctx.profile_id, lambda pid: ProjectMember.profile_id == pid),
            _when(ctx.studio_id, lambda _: ProjectMember.project_id.in_(_studio_projects(ctx))),
        ),
    ),
    DeletionNode(
        'project_invitations', ProjectInvitation,
        lambda ctx: _any_of(
            _when(ctx.profile_id, lambda pid: ProjectInvitation.profile_id == pid),
            _when(ctx.studio_id, lambda _: ProjectInvitation.project_id.in_(_studio_projects(ctx))),
        ),
    ),
    DeletionNode(
        'messages', Message,
        lambda ctx: _any_of(
            _when(ctx.profile_id, lambda pid: or_(
                Message.talent_sender_id == pid, Message.talent_receiver_id == pid
            )),
            _when(ctx.studio_id, lambda sid: or_(
                Message.studio_sender_id == sid, Message.studio_receiver_id == sid
            )),
        ),
    ),
    DeletionNode(
        'studio_notes', StudioNote,
        lambda ctx: _any_of(
            _when(ctx.studio_id, lambda sid: StudioNote.studio_id == sid),
            _when(ctx.profile_id, lambda pid: StudioNote.profile_id == pid),
        ),
    ),
    DeletionNode(
        'casting_calls', CastingCall,
        lambda ctx: _when(ctx.studio_id, lambda sid: CastingCall.studio_id == sid),
        children=('applications',),
    ),
    DeletionNode(
        'external_actor_projects', ExternalActorProject,
        lambda ctx: _when(ctx.studio_id, lambda _: or_(
            ExternalActorProject.external_actor_id.in_(_studio_external_actors(ctx)),
            ExternalActorProject.project_id.in_(_studio_projects(ctx)),
        )),
    ),
    DeletionNode(
        'scenes', Scene,
        lambda ctx: _when(ctx.studio_id, lambda _: Scene.project_id.in_(_studio_projects(ctx))),
        children=('scene_talents',),
    ),
    DeletionNode(
        'projects', Project,
        lambda ctx: _when(ctx.studio_id, lambda sid: Project.studio_id == sid),
        children=(
            'casting_calls', 'project_members', 'project_invitations',
            'scenes', 'external_actor_projects',
        ),
    ),
    DeletionNode(
        'external_actors', ExternalActor,
        lambda ctx: _when(ctx.studio_id, lambda sid: ExternalActor.studio_id == sid),
        children=('external_actor_projects',),
    ),
    DeletionNode(
        'external_actor_links', ExternalActor,
        lambda ctx: _when(ctx.profile_id, lambda pid: ExternalActor.converted_profile_id == pid),
        action='detach',
        detach_column='converted_profile_id',
    ),
    DeletionNode(
        'studio', Studio,
        lambda ctx: _when(ctx.studio_id, lambda sid: Studio.id == sid),
        children=('studio_notes', 'casting_calls', 'projects', 'messages', 'external_actors'),
    ),
    DeletionNode(
        'profile', Profile,
        lambda ctx: _when(ctx.profile_id, lambda pid: Profile.id == pid),
        children=(
            'profile_images', 'applications', 'scene_talents', 'project_members',
            'project_invitations', 'messages', 'studio_notes', 'external_actor_links',
        ),
    ),
    DeletionNode(
        'subscriptions', Subscription,
        lambda ctx: Subscription.user_id == ctx.user_id,
    ),
    DeletionNode(
        'tenant', Tenant,
        lambda ctx: _when(ctx.tenant_id, lambda tid: Tenant.id == tid),
        children=('studio', 'profile'),
    ),
    DeletionNode(
        'user', User,
        lambda ctx: User.id == ctx.user_id,
        children=('subscriptions', 'tenant'),
    ),
]


def build_deletion_plan(nodes: Optional[List[DeletionNode]] = None) -> List[DeletionNode]:
    """
    Order nodes so every node comes after all of its children.

    Among nodes that are ready at the same time, the one declared first wins.

    Raises:
        ValueError: A child name is unknown or the graph has a cycle
    """
    nodes = DELETION_NODES if nodes is None else nodes
    by_name: Dict[str, DeletionNode] = {node.name: node for node in nodes}

    for node in nodes:
        unknown = [child for child in node.children if child not in by_name]
        if unknown:
            raise ValueError(f"Deletion node {node.name} has unknown children: {unknown}")

    done = set()
    plan = []
    while len(plan) < len(nodes):
        ready = next(
            (node for node in nodes
             if node.name not in done and all(child in done for child in node.children)),
            None
        )
        if ready is None:
            pending = [node.name for node in nodes if node.name not in done]
            raise ValueError(f"Deletion graph has a cycle among: {pending}")
        plan.append(ready)
        done.add(ready.name)

    return plan


def _run_node(node: DeletionNode, clause) -> int:
    if node.action == 'detach':
        statement = (
            update(node.model)
            .where(clause)
            .values({node.detach_column: None})
            .execution_options(synchronize_session='fetch')
        )
    else:
        statement = (
            delete(node.model)
            .where(clause)
            .execution_options(synchronize_session='fetch')
        )
    return db.session.execute(statement).rowcount


def execute_plan(
    plan: List[DeletionNode],
    ctx: DeletionContext,
    atomic: bool = False
) -> List[Tuple[str, int]]:
    """
    Run each step of the plan in order.

    Every step commits on its own unless atomic is set, in which case the
    whole plan commits once at the end. The first failing step stops the
    walk; with per-step commits the steps before it stay applied.

    Returns:
        List of (step name, affected row count)

    Raises:
        CascadeStepError: A step failed
    """
    results = []
    for node in plan:
        clause = node.select(ctx)
        if clause is None:
            logger.debug(f"Deletion step {node.name} skipped for user {ctx.user_id}")
            continue

        try:
            count = _run_node(node, clause)
            if not atomic:
                db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.error(
                f"Deletion step {node.name} failed for user {ctx.user_id}: {str(e)}",
                exc_info=True
            )
            raise CascadeStepError(node.name, e) from e

        logger.info(f"Deletion step {node.name}: {count} row(s) for user {ctx.user_id}")
        results.append((node.name, count))

    if atomic:
        try:
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.error(f"Deletion commit failed for user {ctx.user_id}: {str(e)}", exc_info=True)
            raise CascadeStepError('commit', e) from e

    return results
