from fastapi import APIRouter

from .book import router as book_router
from .person import router as person_router

router = APIRouter(prefix="/v1")
router.include_router(book_router)
router.include_router(person_router)


@router.get(
    "/health",
    summary="API Health Check",
    description="Simple health check endpoint for monitoring and container orchestration.",
    responses={
        200: {"description": "API is healthy and responding"},
    },
)
async def health_check():
    """Health check endpoint for Docker health checks."""
    return {"status": "healthy", "message": "Library Lending API is running"}
