from typing import Annotated, Any, Dict

from fastapi import APIRouter, Depends

from caseconf.api.deps import Policy, require_permission
from caseconf.models import Identity
from caseconf.services.dashboard import dashboard_stats

router = APIRouter()


@router.get("/dashboard-stats")
def get_dashboard_stats(
    identity: Annotated[Identity, Depends(require_permission("dashboard", "view"))],
    policy: Policy,
) -> Dict[str, Any]:
    """Overview counts shaped by the caller's role."""
    return dashboard_stats(policy, identity)
