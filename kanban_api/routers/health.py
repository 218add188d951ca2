from fastapi import APIRouter
from kanban_api import __version__
from kanban_api.utils.clock import utcnow

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    return {
        "status": "healthy",
        "timestamp": utcnow().isoformat(),
        "service": "Kanban API",
        "version": __version__,
    }
