"""Identity source resources (``v2.0/identitysources``)."""
from __future__ import annotations
from typing import Optional

from .client import VerifyClient
from .resources import RESOURCE_TYPE_PREFIX, ResourceClient, ResourceKind

IDENTITY_SOURCE = ResourceKind(
    kind="identitysource",
    label="identity source",
    collection_path="v2.0/identitysources",
    collection_field="identitySources",
    name_field="instanceName",
    document_kind=RESOURCE_TYPE_PREFIX + "IdentitySource",
    entitlements=("Manage identity sources",),
    created_message="Identity provider created successfully",
    boilerplate={
        "instanceName": "",
        "sourceTypeId": 0,
        "enabled": True,
        "properties": [{"key": "", "value": "", "sensitive": False}],
        "attributeMappings": [],
    },
)


class IdentitySourceService(ResourceClient):
    """Service for managing identity sources."""

    def __init__(self, client: Optional[VerifyClient] = None):
        super().__init__(IDENTITY_SOURCE, client)
