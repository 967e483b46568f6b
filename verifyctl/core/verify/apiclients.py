"""API client resources (``v1.0/apiclients``)."""
from __future__ import annotations
from typing import Optional

from .client import VerifyClient
from .resources import RESOURCE_TYPE_PREFIX, ResourceClient, ResourceKind

API_CLIENT = ResourceKind(
    kind="apiclient",
    label="API client",
    collection_path="v1.0/apiclients",
    collection_field="apiClients",
    name_field="clientName",
    document_kind=RESOURCE_TYPE_PREFIX + "ApiClient",
    required_lists=("entitlements",),
    entitlements=("Manage API Clients",),
    created_message="API client created successfully",
    boilerplate={
        "clientName": "",
        "description": "",
        "enabled": True,
        "entitlements": [],
        "ipFilterOp": "",
        "ipFilters": [],
        "jwkUri": "",
        "overrideSettings": {},
        "additionalConfig": {},
    },
)


class APIClientService(ResourceClient):
    """Service for managing API clients.

    Usage:
        service = APIClientService(VerifyClient())
        service.create(session, {"clientName": "app1", "entitlements": ["manageUsers"]})
    """

    def __init__(self, client: Optional[VerifyClient] = None):
        super().__init__(API_CLIENT, client)
