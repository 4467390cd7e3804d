"""
Addressing: map a post to its index category and shadow term, and back.

All functions here are lookups: they never write, and the only failure
mode is "not found" (``None`` / ``0`` / ``""``).

Shadow terms carry an explicit ``post_id``.  Lookups try that link first
and fall back to matching by name (or slug, for deleted posts) so rows
written before the link existed are still found.  A name match that is
linked to a *different* post is not treated as this post's term.

Tags:
    addressing, lookup, shadow-term, index-category

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from shadowterms.core.models import INDEX_CATEGORY_SUFFIX, IndexCategory, Post, ShadowTerm
from shadowterms.core.protocols import PostStore, TermStore
from shadowterms.core.registry import IndexCategoryRegistry


class Addressing:
    """Resolve posts, index categories and shadow terms.

    Parameters:
        registry: Registry of index categories.
        posts: Read access to posts.
        terms: Shadow term storage.
    """

    def __init__(self, registry: IndexCategoryRegistry, posts: PostStore, terms: TermStore) -> None:
        self.registry = registry
        self.posts = posts
        self.terms = terms

    # -- post → category / key ---------------------------------------------

    def category_for(self, post: Post) -> IndexCategory | None:
        """Return the registered index category of *post*'s type, or None."""
        if not self.registry.supports(post.post_type):
            return None
        return self.registry.category_for_type(post.post_type)

    @staticmethod
    def entry_key(post: Post) -> tuple[str, str]:
        """Return ``(name, slug)`` a shadow term for *post* should carry."""
        return post.title, post.slug

    # -- post → term ---------------------------------------------------------

    def term_named(self, category: IndexCategory, name: str) -> ShadowTerm | None:
        """Return any term in *category* named *name*, whoever owns it."""
        if not name:
            return None
        return self.terms.get_by_name(category.slug, name)

    def term_for(self, post: Post, category: IndexCategory, title: str | None = None) -> ShadowTerm | None:
        """Return the term mirroring *post*, matched by link then by *title*.

        *title* defaults to the post's current title; the reconciler passes
        the before-title when looking up the term of an outgoing snapshot.
        """
        if post.id:
            term = self.terms.get_by_post(category.slug, post.id)
            if term is not None:
                return term

        name = post.title if title is None else title
        if not name:
            return None
        term = self.terms.get_by_name(category.slug, name)
        return term if self._owned_by(term, post) else None

    def term_for_slug(self, post: Post, category: IndexCategory) -> ShadowTerm | None:
        """Return the term mirroring *post*, matched by link then by slug."""
        if post.id:
            term = self.terms.get_by_post(category.slug, post.id)
            if term is not None:
                return term

        if not post.slug:
            return None
        term = self.terms.get_by_slug(category.slug, post.slug)
        return term if self._owned_by(term, post) else None

    @staticmethod
    def _owned_by(term: ShadowTerm | None, post: Post) -> bool:
        return term is not None and (term.post_id is None or term.post_id == post.id)

    # -- term → post ---------------------------------------------------------

    def post_type_for(self, term: ShadowTerm) -> str | None:
        """Return the post type a term's category mirrors, or None."""
        category = self.registry.get(term.category)
        if category is not None:
            return category.post_type

        if not term.category.endswith(INDEX_CATEGORY_SUFFIX):
            return None
        post_type = term.category[: -len(INDEX_CATEGORY_SUFFIX)]
        return post_type if self.registry.supports(post_type) else None

    def indexed_post_for(self, term: ShadowTerm) -> Post | None:
        """Return the post *term* mirrors.

        None when the category does not map to a known post type, or when
        the title search is ambiguous (several posts) or empty.
        """
        post_type = self.post_type_for(term)
        if post_type is None:
            return None

        if term.post_id:
            post = self.posts.get(term.post_id)
            if post is not None and post.post_type == post_type:
                return post

        matches = self.posts.find_ids_by_title(post_type, term.name)
        if len(matches) != 1:
            return None
        return self.posts.get(matches[0])

    # -- id based helpers (derived read-only fields) -------------------------

    def category_slug_for(self, post_id: int) -> str:
        """Return the index category slug of a post, ``""`` if none."""
        post = self.posts.get(post_id)
        if post is None:
            return ""
        category = self.category_for(post)
        return category.slug if category else ""

    def term_id_for(self, post_id: int) -> int:
        """Return the id of a post's live shadow term, 0 if none."""
        post = self.posts.get(post_id)
        if post is None:
            return 0
        category = self.category_for(post)
        if category is None:
            return 0
        term = self.term_for(post, category)
        return term.id if term else 0

    def post_id_for(self, term_id: int) -> int:
        """Return the id of the post a shadow term mirrors, 0 if none."""
        term = self.terms.get(term_id)
        if term is None:
            return 0
        post = self.indexed_post_for(term)
        return post.id if post else 0


__all__ = ["Addressing"]
