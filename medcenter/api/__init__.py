"""HTTP API for MedCenter.

Usage:
    uvicorn medcenter.api:create_app --factory
"""

from medcenter.api.app import create_app

__all__ = ["create_app"]
