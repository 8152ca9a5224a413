from fastapi import APIRouter
from sehat.api.v1.endpoints import analyze_report, profile, reports, vitals

router = APIRouter()

router.include_router(reports.router, prefix="/reports", tags=["reports"])
router.include_router(vitals.router, prefix="/vitals", tags=["vitals"])
router.include_router(profile.router, tags=["profile"])
router.include_router(analyze_report.router, tags=["analysis"])
