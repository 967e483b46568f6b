"""Verify tenant API client library.

This package is the resource access layer used by the CLI commands.

Architecture:
- sessions.py: Tenant session value (tenant, token, kind)
- client.py: Request building, transport and client-credentials login
- classifier.py: Maps HTTP responses onto the error taxonomy
- resolver.py: Name -> ID resolution through a filtered search
- resources.py: Generic create/get/list/update/delete for a resource kind
- apiclients.py, identitysources.py: Concrete resource kinds
- exceptions.py: Typed exceptions for error handling

Usage:
    from verifyctl.core.verify import VerifyClient, APIClientService

    client = VerifyClient(timeout=30)
    session = client.login("t.example.com", "client-id", "client-secret")

    service = APIClientService(client)
    resource, url = service.get(session, name="app1")
"""
from typing import Optional

from .sessions import Session
from .client import (
    VerifyClient,
    build_request,
    tenant_url,
    REQUEST_TIMEOUT,
)
from .classifier import classify, raise_for_response
from .exceptions import (
    VerifyError,
    ClassifiedError,
    UnauthenticatedError,
    ForbiddenError,
    NotFoundError,
    BadRequestError,
    UnclassifiedError,
    ValidationError,
    NoActiveSessionError,
    AmbiguousNameError,
    MalformedResponseError,
    EncodingError,
    TransportError,
)
from .resolver import resolve_id, search_filter
from .resources import (
    Resource,
    ResourceClient,
    ResourceKind,
    ResourceList,
    unwrap_document,
    wrap_document,
)
from .apiclients import API_CLIENT, APIClientService
from .identitysources import IDENTITY_SOURCE, IdentitySourceService

RESOURCE_KINDS = {
    API_CLIENT.kind: API_CLIENT,
    IDENTITY_SOURCE.kind: IDENTITY_SOURCE,
}


def get_resource_client(kind: str, client: Optional[VerifyClient] = None) -> ResourceClient:
    """Return the CRUD client for a CLI resource kind name (e.g. "apiclient").

    Raises:
        ValidationError: If the kind is unknown
    """
    try:
        resource_kind = RESOURCE_KINDS[kind.lower()]
    except KeyError:
        known = ", ".join(sorted(RESOURCE_KINDS))
        raise ValidationError("kind", f"Unknown resource kind '{kind}'. Use one of: {known}") from None
    return ResourceClient(resource_kind, client)


__all__ = [
    # Client
    "Session",
    "VerifyClient",
    "build_request",
    "tenant_url",
    "REQUEST_TIMEOUT",

    # Classification and resolution
    "classify",
    "raise_for_response",
    "resolve_id",
    "search_filter",

    # Exceptions
    "VerifyError",
    "ClassifiedError",
    "UnauthenticatedError",
    "ForbiddenError",
    "NotFoundError",
    "BadRequestError",
    "UnclassifiedError",
    "ValidationError",
    "NoActiveSessionError",
    "AmbiguousNameError",
    "MalformedResponseError",
    "EncodingError",
    "TransportError",

    # Resources
    "Resource",
    "ResourceClient",
    "ResourceKind",
    "ResourceList",
    "unwrap_document",
    "wrap_document",
    "API_CLIENT",
    "APIClientService",
    "IDENTITY_SOURCE",
    "IdentitySourceService",
    "RESOURCE_KINDS",
    "get_resource_client",
]
