"""Activity log - most recent entries first."""
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from caseconf.api.deps import AppConfig, Store, require_permission
from caseconf.models import Identity

router = APIRouter()


@router.get("/logs")
def list_logs(
    identity: Annotated[Identity, Depends(require_permission("logs", "view"))],
    store: Store,
    config: AppConfig,
    limit: Optional[int] = Query(None, ge=1, le=500),
):
    return [entry.to_json() for entry in store.recent_logs(limit or config.activity_log_limit)]
