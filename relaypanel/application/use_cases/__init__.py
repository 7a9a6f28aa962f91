# relaypanel/application/use_cases/__init__.py

"""
Application service module.

This package contains the application services that implement the
business logic: the client registry, relay synchronization, background
tasks and the facade used by the HTTP layer.
"""

from relaypanel.application.use_cases.client_use_cases import AsyncClientService
from relaypanel.application.use_cases.sync_use_cases import SyncPipeline
from relaypanel.application.use_cases.background_tasks import BackgroundScheduler, PublicIpMonitor
from relaypanel.application.use_cases.panel_use_cases import PanelService

__all__ = [
    "AsyncClientService",
    "SyncPipeline",
    "BackgroundScheduler",
    "PublicIpMonitor",
    "PanelService",
]
