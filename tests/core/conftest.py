"""Fixtures wiring the core collaborators over the in-memory database."""

from dataclasses import dataclass

import pytest

from shadowterms.core.addressing import Addressing
from shadowterms.core.archive import RelationshipArchive
from shadowterms.core.locks import EntityLocks
from shadowterms.core.reconciler import Reconciler
from shadowterms.core.repositories import (
    AttachmentRepository,
    PostRepository,
    RelationshipRepository,
    TermRepository,
)


@dataclass
class Stores:
    posts: PostRepository
    terms: TermRepository
    relationships: RelationshipRepository
    attachments: AttachmentRepository
    addressing: Addressing
    archive: RelationshipArchive
    reconciler: Reconciler


@pytest.fixture
def stores(conn, registry) -> Stores:
    locks = EntityLocks()
    posts = PostRepository(conn)
    terms = TermRepository(conn)
    relationships = RelationshipRepository(conn)
    attachments = AttachmentRepository(conn)
    addressing = Addressing(registry, posts, terms)
    archive = RelationshipArchive(addressing, attachments, locks)
    reconciler = Reconciler(addressing, archive, terms, relationships, locks=locks)
    return Stores(posts, terms, relationships, attachments, addressing, archive, reconciler)
