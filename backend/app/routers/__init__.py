"""
FastAPI routers for the Mendix Model API.
"""

from app.routers import entities, microflows, modules

__all__ = ["modules", "entities", "microflows"]
