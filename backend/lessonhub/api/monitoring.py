"""Monitoring API routes for health checks, metrics and store diagnostics"""
from fastapi import APIRouter, Depends, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from lessonhub.core.security import require_principal
from lessonhub.db.firestore import PERMISSION_GUIDANCE, get_db
from lessonhub.schemas.auth import Principal
from lessonhub.services.admin_service import check_store_access

router = APIRouter(tags=["monitoring"])


@router.get("/metrics")
def metrics_endpoint():
    """Prometheus metrics endpoint"""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@router.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


@router.get("/api/diagnostics/store-access")
def store_access(principal: Principal = Depends(require_principal), db=Depends(get_db)):
    """Probe read access to the videos and users collections"""
    result = check_store_access(db)
    if result.get("isPermissionError"):
        result["guidance"] = PERMISSION_GUIDANCE
    return result
