"""
shadow-terms - keep a derived index entry in step with every published post.

Packages:
- shadowterms.core: models, registry, addressing, archive, reconciler, storage
- shadowterms.ops: transport-agnostic operations (posts, associations, index)
- shadowterms.api: FastAPI application
- shadowterms.cli: Typer command line
"""

__version__ = "0.1.0"
