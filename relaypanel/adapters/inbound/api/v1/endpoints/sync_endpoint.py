# relaypanel/adapters/inbound/api/v1/endpoints/sync_endpoint.py

from fastapi import APIRouter, Depends

from relaypanel.adapters.inbound.api.deps import get_panel_service, verify_admin_token
from relaypanel.adapters.inbound.api.v1.endpoints.presenters import present_status, present_sync_status
from relaypanel.application.dtos.client_dto import CleanupOutput, OperationOutput, StatusOutput
from relaypanel.application.use_cases.panel_use_cases import PanelService

router = APIRouter(dependencies=[Depends(verify_admin_token)])


@router.get("/status", response_model=StatusOutput)
async def get_status(panel: PanelService = Depends(get_panel_service)):
    """
    Registry size, active count, last sync snapshot and public IP.
    """
    return present_status(await panel.get_status())


@router.post("/sync", response_model=OperationOutput)
async def trigger_sync(panel: PanelService = Depends(get_panel_service)):
    """
    Rewrite the relay configuration and reload the relay.
    """
    sync_status = await panel.trigger_manual_sync()
    return OperationOutput(sync_status=present_sync_status(sync_status))


@router.post("/cleanup-expired", response_model=CleanupOutput)
async def cleanup_expired(panel: PanelService = Depends(get_panel_service)):
    """
    Remove expired clients; the relay is synced only if something was removed.
    """
    result, sync_status = await panel.trigger_cleanup()
    return CleanupOutput(removed=result.removed, sync_status=present_sync_status(sync_status))
