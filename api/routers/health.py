"""
Health check router.

This router provides a liveness endpoint for monitoring and load balancers.
"""

from fastapi import APIRouter

router = APIRouter(
    tags=["Health"],
)


@router.get("/health")
def health():
    """
    Simple liveness endpoint for the LiftLog API.

    Returns:
        dict: Status indicator for health checks
    """
    return {"status": "ok"}
