# declarative_find/api/discovery.py
"""
Root-level discovery and health endpoints.
"""
from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health(request: Request) -> dict:
    controllers = getattr(request.app.state, "controllers", None)
    return {
        "status": "healthy",
        "controllers": len(controllers) if controllers else 0,
    }


@router.get("/controllers")
async def list_controllers(request: Request) -> list[dict]:
    """Describe mounted controllers, their actions and find bindings."""
    controllers = getattr(request.app.state, "controllers", None)
    if not controllers:
        return []
    return [c.describe() for c in controllers]
