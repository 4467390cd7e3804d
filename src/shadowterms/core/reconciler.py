"""
Reconciler: keep shadow terms in step with post lifecycle events.

A mutation is judged on its (before, after) snapshot pair.  The rules are
evaluated in order and the first match wins:

    1. neither snapshot is published             → nothing
    2. post type does not support shadow terms   → nothing
    3. its index category is not registered      → nothing
    4. unpublished → published, no term named
       after the new title                       → CREATE term, restore archive
    5. term for the old title exists, post is
       published, title or slug changed          → RENAME term in place
    6. published → unpublished, term for the
       old title exists                          → ARCHIVE relationships, DELETE term
    7. anything else                             → nothing

A hard delete removes the term found by the deleted post's slug, without
archiving: there is nothing left to restore the relationships to.

Deciding and doing are separate steps.  :meth:`Reconciler.plan_mutation`
and :meth:`Reconciler.plan_delete` only read and return a
:class:`ReconcilePlan`; :meth:`Reconciler.apply` performs a plan against
the storage ports.  :meth:`handle_mutation` / :meth:`handle_delete` do both
and are what the lifecycle hooks call; they hold the post's lock from
planning through applying, so the archive read by a plan is the one the
plan acts on.  They never raise: the post write that triggered them is
already committed, so a failure is logged and reported in the returned
:class:`ReconcileOutcome`.

Architecture:
    ::

        MutationEvent ──► plan_mutation ──► ReconcilePlan ──► apply ──► ReconcileOutcome
                              │                                  │
                         Addressing                      TermStore / RelationshipStore
                         RelationshipArchive (read)      RelationshipArchive (write)

Tags:
    reconciler, state-machine, shadow-term, lifecycle, sync

Doc-Types:
    - API Reference
    - Architecture Documentation
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from shadowterms.core.addressing import Addressing
from shadowterms.core.archive import RelationshipArchive
from shadowterms.core.events import DeleteEvent, MutationEvent
from shadowterms.core.locks import EntityLocks, get_entity_locks
from shadowterms.core.logging import get_logger
from shadowterms.core.models import VISIBLE_STATUS, IndexCategory, Post, ShadowTerm
from shadowterms.core.protocols import RelationshipStore, TermStore
from shadowterms.core.slugs import slugify

logger = get_logger(__name__)


class ReconcileAction(str, Enum):
    """What a plan does to the index."""

    NONE = "none"
    CREATE = "create"
    RENAME = "rename"
    ARCHIVE_AND_DELETE = "archive_and_delete"
    DELETE = "delete"


class SkipReason(str, Enum):
    """Why a plan does nothing."""

    NOT_VISIBLE = "not_visible"
    UNSUPPORTED_TYPE = "unsupported_type"
    CATEGORY_UNREGISTERED = "category_unregistered"
    EMPTY_TITLE = "empty_title"
    TERM_MISSING = "term_missing"
    NO_CHANGE = "no_change"


@dataclass(frozen=True, slots=True)
class ReconcilePlan:
    """A decided, not yet applied, index mutation.

    Attributes:
        action: The mutation to perform.
        post: Snapshot the plan is about (the *after* snapshot for mutations).
        category: Resolved index category (None when skipped early).
        term: Existing term acted on by RENAME / ARCHIVE_AND_DELETE / DELETE.
        name: Term name to write (CREATE / RENAME).
        slug: Term slug to write (CREATE / RENAME).
        restore_ids: Archived post ids to relate to a created term.
        reason: Why nothing happens, for NONE plans.
    """

    action: ReconcileAction
    post: Post
    category: IndexCategory | None = None
    term: ShadowTerm | None = None
    name: str = ""
    slug: str = ""
    restore_ids: tuple[int, ...] = ()
    reason: SkipReason | None = None

    @property
    def is_noop(self) -> bool:
        return self.action is ReconcileAction.NONE


@dataclass(frozen=True, slots=True)
class ReconcileOutcome:
    """Result of applying (or failing to apply) a plan."""

    plan: ReconcilePlan
    applied: bool = False
    term_id: int | None = None
    archived_ids: tuple[int, ...] = ()
    restored_ids: tuple[int, ...] = ()
    error: str | None = None


class Reconciler:
    """Mutation and deletion handlers for shadow terms.

    Parameters:
        addressing: Lookups for categories and terms.
        archive: Relationship archive.
        terms: Shadow term storage.
        relationships: Relationship storage.
        visible_status: The status that keeps a term alive.
        locks: Per-post lock table; the apply step holds the post's lock.
    """

    def __init__(
        self,
        addressing: Addressing,
        archive: RelationshipArchive,
        terms: TermStore,
        relationships: RelationshipStore,
        *,
        visible_status: str = VISIBLE_STATUS,
        locks: EntityLocks | None = None,
    ) -> None:
        self.addressing = addressing
        self.archive = archive
        self.terms = terms
        self.relationships = relationships
        self.visible_status = visible_status
        self.locks = locks or get_entity_locks()

    def _visible(self, status: str) -> bool:
        return status == self.visible_status

    # -- planning ------------------------------------------------------------

    def plan_mutation(self, event: MutationEvent) -> ReconcilePlan:
        """Decide what a create/update means for the index."""
        after = event.after
        before = event.before

        status_before = before.status if before else ""
        title_before = before.title if before else ""
        slug_before = before.slug if before else ""

        if not (self._visible(status_before) or self._visible(after.status)):
            return ReconcilePlan(ReconcileAction.NONE, after, reason=SkipReason.NOT_VISIBLE)

        registry = self.addressing.registry
        if not registry.supports(after.post_type):
            return ReconcilePlan(ReconcileAction.NONE, after, reason=SkipReason.UNSUPPORTED_TYPE)

        category = registry.category_for_type(after.post_type)
        if category is None:
            return ReconcilePlan(ReconcileAction.NONE, after, reason=SkipReason.CATEGORY_UNREGISTERED)

        outgoing = before if before is not None else after
        term_before = (
            self.addressing.term_for(outgoing, category, title=title_before) if title_before else None
        )

        if not self._visible(status_before) and self._visible(after.status):
            term_after = None
            if after.title:
                term_after = self.addressing.term_for(after, category) or self.addressing.term_named(
                    category, after.title
                )
            if term_after is None:
                if not after.title:
                    return ReconcilePlan(ReconcileAction.NONE, after, category, reason=SkipReason.EMPTY_TITLE)
                return ReconcilePlan(
                    ReconcileAction.CREATE,
                    after,
                    category,
                    name=after.title,
                    slug=after.slug or slugify(after.title),
                    restore_ids=tuple(self.archive.read(after, category)),
                )

        changed = title_before != after.title or slug_before != after.slug

        if term_before is not None and self._visible(after.status) and changed:
            return ReconcilePlan(
                ReconcileAction.RENAME,
                after,
                category,
                term=term_before,
                name=after.title,
                slug=after.slug or slugify(after.title),
            )

        if not self._visible(after.status) and term_before is not None:
            return ReconcilePlan(ReconcileAction.ARCHIVE_AND_DELETE, after, category, term=term_before)

        return ReconcilePlan(ReconcileAction.NONE, after, category, reason=SkipReason.NO_CHANGE)

    def plan_delete(self, event: DeleteEvent) -> ReconcilePlan:
        """Decide what a hard delete means for the index."""
        post = event.post
        registry = self.addressing.registry

        if not registry.supports(post.post_type):
            return ReconcilePlan(ReconcileAction.NONE, post, reason=SkipReason.UNSUPPORTED_TYPE)

        category = registry.category_for_type(post.post_type)
        if category is None:
            return ReconcilePlan(ReconcileAction.NONE, post, reason=SkipReason.CATEGORY_UNREGISTERED)

        term = self.addressing.term_for_slug(post, category)
        if term is None:
            return ReconcilePlan(ReconcileAction.NONE, post, category, reason=SkipReason.TERM_MISSING)

        return ReconcilePlan(ReconcileAction.DELETE, post, category, term=term)

    # -- applying ------------------------------------------------------------

    def apply(self, plan: ReconcilePlan) -> ReconcileOutcome:
        """Perform *plan* against the storage ports.

        Storage exceptions propagate; see :meth:`handle_mutation` for the
        non-raising entry point.
        """
        if plan.is_noop or plan.category is None:
            return ReconcileOutcome(plan)

        category = plan.category
        post = plan.post

        with self.locks.hold(post.id):
            if plan.action is ReconcileAction.CREATE:
                term = self.terms.create(category.slug, plan.name, plan.slug, post_id=post.id or None)
                for object_id in plan.restore_ids:
                    self.relationships.relate(category.slug, object_id, term.id)
                logger.info(
                    "shadow_term.created",
                    post_id=post.id,
                    term_id=term.id,
                    index_category=category.slug,
                    restored=len(plan.restore_ids),
                )
                return ReconcileOutcome(plan, applied=True, term_id=term.id, restored_ids=plan.restore_ids)

            if plan.term is None:
                raise ValueError(f"{plan.action.value} plan for post {post.id} carries no term")

            if plan.action is ReconcileAction.RENAME:
                self.terms.update(plan.term.id, name=plan.name, slug=plan.slug)
                logger.info(
                    "shadow_term.renamed",
                    post_id=post.id,
                    term_id=plan.term.id,
                    name=plan.name,
                    slug=plan.slug,
                )
                return ReconcileOutcome(plan, applied=True, term_id=plan.term.id)

            if plan.action is ReconcileAction.ARCHIVE_AND_DELETE:
                related = tuple(self.relationships.objects_for_term(category.slug, plan.term.id))
                self.archive.write(post, related, category)
                self.terms.delete(plan.term.id)
                logger.info(
                    "shadow_term.archived",
                    post_id=post.id,
                    term_id=plan.term.id,
                    archived=len(related),
                )
                return ReconcileOutcome(plan, applied=True, term_id=plan.term.id, archived_ids=related)

            self.terms.delete(plan.term.id)
            logger.info("shadow_term.deleted", post_id=post.id, term_id=plan.term.id)
            return ReconcileOutcome(plan, applied=True, term_id=plan.term.id)

    # -- hook entry points ---------------------------------------------------

    def handle_mutation(self, event: MutationEvent) -> ReconcileOutcome:
        """Plan and apply a create/update; never raises."""
        return self._handle(event.post_id, lambda: self.plan_mutation(event))

    def handle_delete(self, event: DeleteEvent) -> ReconcileOutcome:
        """Plan and apply a hard delete; never raises."""
        return self._handle(event.post_id, lambda: self.plan_delete(event))

    def _handle(self, post_id: int, plan_fn: Callable[[], ReconcilePlan]) -> ReconcileOutcome:
        plan: ReconcilePlan | None = None
        try:
            with self.locks.hold(post_id):
                plan = plan_fn()
                if plan.is_noop:
                    logger.debug(
                        "reconcile.skipped", post_id=post_id, reason=plan.reason.value if plan.reason else None
                    )
                    return ReconcileOutcome(plan)
                return self.apply(plan)
        except Exception as exc:
            logger.exception("reconcile.failed", post_id=post_id, error=str(exc))
            if plan is None:
                plan = ReconcilePlan(ReconcileAction.NONE, Post(id=post_id, post_type=""))
            return ReconcileOutcome(plan, applied=False, error=str(exc))


__all__ = [
    "ReconcileAction",
    "ReconcileOutcome",
    "ReconcilePlan",
    "Reconciler",
    "SkipReason",
]
