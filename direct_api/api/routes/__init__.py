"""FastAPI route modules.

Exports all route modules for inclusion in the main application.
"""

from direct_api.api.routes import challenges

__all__ = ["challenges"]
