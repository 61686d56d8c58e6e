"""
API routes for the personal-finance calculators.
"""

from fastapi import APIRouter

from fincalc.api import analyses, calculations

router = APIRouter()

# Include sub-routers
router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
router.include_router(analyses.router, prefix="/analyses", tags=["analyses"])
