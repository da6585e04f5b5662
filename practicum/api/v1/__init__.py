"""
API v1 routes.
"""

from fastapi import APIRouter

from practicum.api.v1 import assignments, auth, competencies, records, users, verifications

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(assignments.router, prefix="/assignments", tags=["Assignments"])
router.include_router(verifications.router, prefix="/verifications", tags=["Verification"])
router.include_router(records.router, prefix="/records", tags=["Records"])
router.include_router(competencies.router, prefix="/competencies", tags=["Competencies"])
