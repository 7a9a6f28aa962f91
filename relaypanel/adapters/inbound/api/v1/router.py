# relaypanel/adapters/inbound/api/v1/router.py

from fastapi import APIRouter
from relaypanel.adapters.inbound.api.v1.endpoints import client_endpoint, sync_endpoint

api_router = APIRouter()

# Include the endpoint routers
api_router.include_router(client_endpoint.router, prefix="/clients", tags=["Clients"])
api_router.include_router(sync_endpoint.router, tags=["Relay"])
