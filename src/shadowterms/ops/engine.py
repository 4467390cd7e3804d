"""
Per-request wiring of the reconciliation engine.

Builds the SQLite repositories, the addressing layer, the archive, the
reconciler and a :class:`LifecycleHooks` dispatcher for one
:class:`OperationContext`.  The reconciler is always the first subscriber;
extra subscribers on ``ctx.hooks`` receive every event after it.

Usage::

    engine = ShadowEngine.for_context(ctx)
    outcomes = engine.hooks.fire_mutation(post.id, post, is_update=False)
"""

from __future__ import annotations

from dataclasses import dataclass

from shadowterms.core.addressing import Addressing
from shadowterms.core.archive import RelationshipArchive
from shadowterms.core.events import POST_DELETED, POST_MUTATED, LifecycleHooks
from shadowterms.core.models import Post
from shadowterms.core.reconciler import ReconcileOutcome, Reconciler
from shadowterms.core.repositories import (
    AttachmentRepository,
    PostRepository,
    RelationshipRepository,
    TermRepository,
)
from shadowterms.ops.context import OperationContext
from shadowterms.ops.responses import PostDetail


@dataclass
class ShadowEngine:
    """Everything an operation needs, bound to one connection."""

    posts: PostRepository
    terms: TermRepository
    relationships: RelationshipRepository
    attachments: AttachmentRepository
    addressing: Addressing
    archive: RelationshipArchive
    reconciler: Reconciler
    hooks: LifecycleHooks

    def describe(self, post: Post, visible_status: str, index_action: str | None = None) -> PostDetail:
        """Project *post* with its derived index fields.

        The shadow term id is only reported while the post is visible.
        """
        category = self.addressing.category_for(post)
        term_id = 0
        if category is not None and post.status == visible_status:
            term = self.addressing.term_for(post, category)
            term_id = term.id if term else 0
        return PostDetail(
            id=post.id,
            post_type=post.post_type,
            title=post.title,
            slug=post.slug,
            status=post.status,
            shadow_taxonomy=category.slug if category else "",
            shadow_term_id=term_id,
            associated_posts=self.archive.read(post, category) if category else [],
            index_action=index_action,
        )

    @classmethod
    def for_context(cls, ctx: OperationContext) -> ShadowEngine:
        posts = PostRepository(ctx.conn)
        terms = TermRepository(ctx.conn)
        relationships = RelationshipRepository(ctx.conn)
        attachments = AttachmentRepository(ctx.conn)

        addressing = Addressing(ctx.registry, posts, terms)
        archive = RelationshipArchive(addressing, attachments, ctx.locks)
        reconciler = Reconciler(
            addressing,
            archive,
            terms,
            relationships,
            visible_status=ctx.visible_status,
            locks=ctx.locks,
        )

        hooks = LifecycleHooks()
        hooks.subscribe(POST_MUTATED, reconciler.handle_mutation)
        hooks.subscribe(POST_DELETED, reconciler.handle_delete)
        if ctx.hooks is not None:
            hooks.subscribe("*", ctx.hooks.dispatch)

        return cls(
            posts=posts,
            terms=terms,
            relationships=relationships,
            attachments=attachments,
            addressing=addressing,
            archive=archive,
            reconciler=reconciler,
            hooks=hooks,
        )


def reconcile_outcome(results: list[object]) -> ReconcileOutcome | None:
    """Pick the reconciler's outcome out of a dispatch result list."""
    for result in results:
        if isinstance(result, ReconcileOutcome):
            return result
    return None
