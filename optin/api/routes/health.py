"""
Health endpoint.

- /health_check: process is up and serving requests (empty 200)
"""

from fastapi import APIRouter, Response, status

router = APIRouter()


@router.get("/health_check", status_code=status.HTTP_200_OK)
def health_check() -> Response:
    """Liveness probe."""
    return Response(status_code=status.HTTP_200_OK)
