"""Directory API routes - main router that includes the directory route modules."""

from fastapi import APIRouter

from orgwalk.features.directory.routes.people import router as people_router
from orgwalk.features.directory.routes.search import router as search_router

router = APIRouter(
    prefix="/directory",
    tags=["directory"],
)

# Include all route handlers
router.include_router(people_router)
router.include_router(search_router)
