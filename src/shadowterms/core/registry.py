"""
Index category registry.

Maps each participating post type to the descriptor of its index
category.  Registration is explicit: a post type first *declares support*
for shadow terms (with the list of post types allowed to relate to its
terms), then its index category is *registered*.  Only registered
categories are ever touched by the reconciler; a post type that declares
support but whose category is not registered is silently skipped.

The ``<post_type>_connect`` naming rule is kept as the default for
building a descriptor, but lookups go through the registry, never through
string inference.

Architecture:
    ::

        declare_support("example", connected=["post"])
              │
              ▼
        register("example")  ──►  IndexCategory(slug="example_connect",
              │                                 post_type="example",
              │                                 object_types=("post",))
              ▼
        category_for_type("example")  /  get("example_connect")

    A YAML file can declare everything at startup::

        post_types:
          example:
            connected: [post]
          draft-only:
            connected: [post]
            register: false

Guardrails:
    ❌ DON'T: Derive a category by appending ``_connect`` at call sites
    ✅ DO: Ask the registry (``category_for_type``)

Tags:
    registry, index-category, registration, yaml, shadow-terms

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

import threading
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field

from shadowterms.core.errors import RegistrationError
from shadowterms.core.logging import get_logger
from shadowterms.core.models import INDEX_CATEGORY_SUFFIX, IndexCategory

logger = get_logger(__name__)


def default_category_slug(post_type: str) -> str:
    """Return the default index category slug for *post_type*."""
    return f"{post_type}{INDEX_CATEGORY_SUFFIX}"


# ---------------------------------------------------------------------------
# Declarative registration
# ---------------------------------------------------------------------------


class PostTypeSpec(BaseModel):
    """One post type entry in a registration file."""

    model_config = ConfigDict(extra="forbid")

    connected: list[str] = Field(default_factory=list, description="Post types that may relate to its terms")
    index_category: str | None = Field(default=None, description="Override the default category slug")
    label: str = ""
    description: str = ""
    register: bool = Field(default=True, description="False declares support without registering")


class RegistrationSpec(BaseModel):
    """Root of a registration file."""

    model_config = ConfigDict(extra="forbid")

    post_types: dict[str, PostTypeSpec] = Field(default_factory=dict)

    @classmethod
    def from_yaml(cls, yaml_content: str) -> RegistrationSpec:
        """Parse and validate YAML content.

        Raises:
            ValueError: If the YAML is malformed or doesn't match the schema.
        """
        try:
            data = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML: {e}") from e
        return cls.model_validate(data or {})

    @classmethod
    def from_yaml_file(cls, path: str | Path) -> RegistrationSpec:
        """Load and validate a registration file."""
        content = Path(path).read_text(encoding="utf-8")
        return cls.from_yaml(content)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class IndexCategoryRegistry:
    """Thread-safe registry of post type support and index categories."""

    def __init__(self) -> None:
        self._supports: dict[str, PostTypeSpec] = {}
        self._categories: dict[str, IndexCategory] = {}
        self._by_type: dict[str, str] = {}
        self._lock = threading.RLock()

    # -- declaration -------------------------------------------------------

    def declare_support(
        self,
        post_type: str,
        connected: list[str] | tuple[str, ...] | None = None,
        *,
        index_category: str | None = None,
        label: str = "",
        description: str = "",
    ) -> None:
        """Declare that *post_type* supports shadow terms.

        Declaring support does not register the index category; call
        :meth:`register` or :meth:`register_all` for that.
        """
        if not post_type:
            raise RegistrationError("post type name is required")
        with self._lock:
            self._supports[post_type] = PostTypeSpec(
                connected=list(connected or []),
                index_category=index_category,
                label=label,
                description=description,
            )

    def register(
        self,
        post_type: str,
        connected: list[str] | tuple[str, ...] | None = None,
        *,
        index_category: str | None = None,
        label: str = "",
        description: str = "",
    ) -> IndexCategory:
        """Declare support (if given arguments) and register the index category.

        Raises:
            RegistrationError: If the slug is already owned by another post type.
        """
        with self._lock:
            if post_type not in self._supports or connected is not None or index_category or label:
                existing = self._supports.get(post_type)
                self.declare_support(
                    post_type,
                    connected if connected is not None else (existing.connected if existing else []),
                    index_category=index_category or (existing.index_category if existing else None),
                    label=label or (existing.label if existing else ""),
                    description=description or (existing.description if existing else ""),
                )

            spec = self._supports[post_type]
            slug = spec.index_category or default_category_slug(post_type)

            owner = self._categories.get(slug)
            if owner is not None and owner.post_type != post_type:
                raise RegistrationError(
                    f"index category '{slug}' is already registered for '{owner.post_type}'"
                ).with_context(index_category=slug, post_type=post_type)

            previous_slug = self._by_type.get(post_type)
            if previous_slug and previous_slug != slug:
                self._categories.pop(previous_slug, None)

            category = IndexCategory(
                slug=slug,
                post_type=post_type,
                object_types=tuple(spec.connected),
                label=spec.label or post_type,
                description=spec.description,
            )
            self._categories[slug] = category
            self._by_type[post_type] = slug

        logger.debug("index_category.registered", post_type=post_type, index_category=slug)
        return category

    def register_all(self) -> list[IndexCategory]:
        """Register an index category for every post type declaring support."""
        with self._lock:
            post_types = list(self._supports)
        return [self.register(post_type) for post_type in post_types]

    def unregister(self, post_type: str) -> None:
        """Remove the index category of *post_type* (support stays declared)."""
        with self._lock:
            slug = self._by_type.pop(post_type, None)
            if slug:
                self._categories.pop(slug, None)

    def load(self, spec: RegistrationSpec) -> list[IndexCategory]:
        """Apply a :class:`RegistrationSpec`; returns the registered categories."""
        registered: list[IndexCategory] = []
        for post_type, entry in spec.post_types.items():
            self.declare_support(
                post_type,
                entry.connected,
                index_category=entry.index_category,
                label=entry.label,
                description=entry.description,
            )
            if entry.register:
                registered.append(self.register(post_type))
        logger.info("registry.loaded", post_types=len(spec.post_types), registered=len(registered))
        return registered

    def clear(self) -> None:
        """Forget everything (useful in tests)."""
        with self._lock:
            self._supports.clear()
            self._categories.clear()
            self._by_type.clear()

    # -- queries -----------------------------------------------------------

    def supports(self, post_type: str) -> bool:
        """Return True if *post_type* declared support for shadow terms."""
        return post_type in self._supports

    def category_for_type(self, post_type: str) -> IndexCategory | None:
        """Return the registered index category of *post_type*, or None."""
        slug = self._by_type.get(post_type)
        return self._categories.get(slug) if slug else None

    def get(self, slug: str) -> IndexCategory | None:
        """Return the registered index category with *slug*, or None."""
        return self._categories.get(slug)

    def exists(self, slug: str) -> bool:
        """Return True if an index category with *slug* is registered."""
        return slug in self._categories

    def connected_categories(self, post_type: str) -> list[str]:
        """Return the post types allowed to relate to *post_type*'s terms."""
        spec = self._supports.get(post_type)
        return list(spec.connected) if spec else []

    def is_index_category(self, name: str) -> bool:
        """Return True if *name* names an index category.

        Registered slugs always qualify; unregistered names qualify when
        they carry the default suffix (case-insensitive).
        """
        if name in self._categories:
            return True
        return name.lower().endswith(INDEX_CATEGORY_SUFFIX)

    def categories(self) -> list[IndexCategory]:
        """Return all registered index categories, sorted by slug."""
        with self._lock:
            return sorted(self._categories.values(), key=lambda c: c.slug)


# ---------------------------------------------------------------------------
# Process-wide default
# ---------------------------------------------------------------------------

_registry = IndexCategoryRegistry()


def get_registry() -> IndexCategoryRegistry:
    """Return the process-wide registry."""
    return _registry


def clear_registry() -> None:
    """Clear the process-wide registry (useful in tests)."""
    _registry.clear()


__all__ = [
    "IndexCategoryRegistry",
    "PostTypeSpec",
    "RegistrationSpec",
    "clear_registry",
    "default_category_slug",
    "get_registry",
]
