"""API v1 router aggregation."""

from fastapi import APIRouter

from affinity.api.v1.interests import router as interests_router
from affinity.api.v1.persons import router as persons_router

router = APIRouter(prefix="/api/v1")

router.include_router(interests_router)
router.include_router(persons_router)
