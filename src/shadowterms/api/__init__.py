"""
shadow-terms REST API.

Usage::

    uvicorn shadowterms.api.app:create_app --factory
"""

from shadowterms.api.app import create_app

__all__ = ["create_app"]
