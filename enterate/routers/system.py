from fastapi import APIRouter, Depends
from typing import Dict, Any

from ..context import AppContext
from ..dependencies.permissions import get_app_context
from ..utils.router_helpers import handle_service_errors, RouterResponse

router = APIRouter(tags=["system"])


@router.get("/health", response_model=Dict[str, Any])
async def health(context: AppContext = Depends(get_app_context)):
    return {"status": "healthy", "backend": context.backend.kind.value}


@router.get("/status", response_model=Dict[str, Any])
@handle_service_errors
async def get_status(context: AppContext = Depends(get_app_context)):
    """Active backend plus local storage figures"""
    report = context.migration.last_report
    return RouterResponse.success(
        data={
            "backend": context.backend.kind.value,
            "session_id": context.local_store.get_or_create_session_id(),
            "local": context.local_store.stats(),
            "last_migration": (
                {
                    "source": report.source,
                    "attempted": report.attempted,
                    "migrated": report.migrated,
                    "failed": report.failed,
                }
                if report
                else None
            ),
        }
    )


@router.post("/refresh", response_model=Dict[str, Any])
@handle_service_errors
async def refresh(context: AppContext = Depends(get_app_context)):
    """Re-run the load path on the backend chosen at startup"""
    events = context.migration.load_events()
    return RouterResponse.success(
        data={
            "backend": context.backend.kind.value,
            "events": events,
            "total": len(events),
        }
    )
