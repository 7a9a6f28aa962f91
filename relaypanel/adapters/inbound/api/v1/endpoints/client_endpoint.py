# relaypanel/adapters/inbound/api/v1/endpoints/client_endpoint.py

"""
Endpoints for proxy client management.

Every mutation is saved first and then synchronized with the relay.
Domain exceptions are translated into HTTP responses by the exception
middleware.
"""

import logging

from fastapi import APIRouter, Depends, Path, Request, status

from relaypanel.adapters.inbound.api.deps import get_container, get_panel_service, verify_admin_token
from relaypanel.adapters.inbound.api.v1.endpoints.presenters import present_client, present_sync_status
from relaypanel.application.dtos.client_dto import (
    ClientCreate,
    ClientListOutput,
    ClientMutationOutput,
    ClientUpdate,
    OperationOutput,
)
from relaypanel.application.use_cases.panel_use_cases import PanelService
from relaypanel.core.container import ServiceContainer

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(verify_admin_token)])


@router.get("", response_model=ClientListOutput)
async def list_clients(
        request: Request,
        panel: PanelService = Depends(get_panel_service),
        container: ServiceContainer = Depends(get_container),
):
    """
    List all clients, newest first, with their proxy links.
    """
    clients = sorted(await panel.list_clients(), key=lambda c: c.created_at, reverse=True)
    return ClientListOutput(clients=[present_client(c, request, container) for c in clients])


@router.post("", response_model=ClientMutationOutput, status_code=status.HTTP_201_CREATED)
async def create_client(
        request: Request,
        data: ClientCreate,
        panel: PanelService = Depends(get_panel_service),
        container: ServiceContainer = Depends(get_container),
):
    """
    Create a client and sync the relay.
    """
    client, sync_status = await panel.create_client(data)
    return ClientMutationOutput(
        client=present_client(client, request, container),
        sync_status=present_sync_status(sync_status),
    )


@router.put("/{client_id}", response_model=ClientMutationOutput)
async def update_client(
        request: Request,
        data: ClientUpdate,
        client_id: str = Path(..., description="Client identifier"),
        panel: PanelService = Depends(get_panel_service),
        container: ServiceContainer = Depends(get_container),
):
    """
    Update a client and sync the relay.
    """
    client, sync_status = await panel.update_client(client_id, data)
    return ClientMutationOutput(
        client=present_client(client, request, container),
        sync_status=present_sync_status(sync_status),
    )


@router.delete("/{client_id}", response_model=OperationOutput)
async def delete_client(
        client_id: str = Path(..., description="Client identifier"),
        panel: PanelService = Depends(get_panel_service),
):
    """
    Delete a client and sync the relay.
    """
    sync_status = await panel.delete_client(client_id)
    return OperationOutput(sync_status=present_sync_status(sync_status))
