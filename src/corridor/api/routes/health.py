"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/graph", status_code=status.HTTP_200_OK)
def health_graph() -> dict:
    """Check that the routing graph can be loaded."""
    from ...data.graph_repository import load_road_graph

    try:
        graph = load_road_graph()
        return {"service": "graph", "healthy": True, "edges": len(graph)}
    except (FileNotFoundError, ValueError) as e:
        return {"service": "graph", "healthy": False, "error": str(e)}
