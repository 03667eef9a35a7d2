"""
API роуты.
"""
from typing import Optional

from fastapi import APIRouter, HTTPException

from apartments_sync.services.sync_service import SyncInProgressError

router = APIRouter()


@router.get("/health")
def health():
    """Проверка живости и краткое состояние снимка."""
    from .app import get_pipeline
    pipeline = get_pipeline()

    return {
        "status": "ok",
        "listings": pipeline.db.listings.count(),
        "last_synced_at": pipeline.db.listings.last_synced_at(),
        "sync_running": pipeline.sync.is_running,
    }


@router.get("/api/listings")
def get_listings(
    rooms_count: Optional[int] = None,
    project_name: Optional[str] = None,
    sort_by: Optional[str] = None,
    sort_order: str = "asc"
):
    """Квартиры из снимка с фильтром и сортировкой."""
    from .app import get_pipeline
    pipeline = get_pipeline()

    try:
        records = pipeline.query(
            rooms_count=rooms_count,
            project_name=project_name,
            sort_by=sort_by,
            sort_order=sort_order
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return [record.to_dict() for record in records]


@router.get("/api/projects")
def get_projects():
    """Названия проектов в текущем снимке."""
    from .app import get_pipeline
    return get_pipeline().get_projects()


@router.get("/api/stats")
def get_stats():
    """Статистика снимка и последний запуск синхронизации."""
    from .app import get_pipeline
    return get_pipeline().get_statistics()


@router.post("/api/actions/sync")
async def run_sync():
    """Запускает синхронизацию; 409 если она уже идёт."""
    from .app import get_pipeline
    pipeline = get_pipeline()

    try:
        result = await pipeline.run_sync()
    except SyncInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return {
        "status": "ok" if result.success else "error",
        **result.to_dict()
    }
