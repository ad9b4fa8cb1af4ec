"""
Metrics endpoint for performance monitoring.
"""
from fastapi import APIRouter
from app.core.performance import PerformanceMonitor
from app.core.store import get_dataset_store

router = APIRouter()


@router.get("/metrics")
async def get_metrics():
    """Timings of engine stages and requests, plus dataset store statistics."""
    return {
        'performance': PerformanceMonitor.get_all_metrics(),
        'datasets': get_dataset_store().get_stats()
    }
