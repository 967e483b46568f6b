"""Generic CRUD client for named Verify resources.

Each resource kind (API clients, identity sources, ...) is described by a
``ResourceKind``; ``ResourceClient`` implements create/get/list/update/delete
once for all of them. Name-keyed operations resolve the ID first, and every
HTTP failure goes through the error classifier.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from verifyctl.core import validators
from .classifier import classify
from .client import VerifyClient, build_request
from .exceptions import MalformedResponseError, ValidationError
from .resolver import parse_collection, resolve_id
from .sessions import Session

logger = logging.getLogger(__name__)

RESOURCE_API_VERSION = "1.0"
RESOURCE_TYPE_PREFIX = "IBMVerify"


@dataclass(frozen=True)
class ResourceKind:
    """Static description of one resource type."""
    kind: str
    label: str
    collection_path: str
    collection_field: str
    name_field: str
    document_kind: str
    required_fields: Tuple[str, ...] = ()
    required_lists: Tuple[str, ...] = ()
    entitlements: Tuple[str, ...] = ()
    created_message: str = ""
    boilerplate: Dict[str, Any] = field(default_factory=dict)

    def item_path(self, resource_id: str) -> str:
        return f"{self.collection_path}/{resource_id}"

    def validate(self, document: Any) -> dict:
        fields = (self.name_field,) + tuple(f for f in self.required_fields if f != self.name_field)
        return validators.validate_document(document, fields, self.required_lists)


@dataclass
class Resource:
    """A remote entity: service ID, name, and kind-specific attributes."""
    name: str
    id: Optional[str] = None
    attributes: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, kind: ResourceKind, data: Dict[str, Any]) -> "Resource":
        """Create from an API response object."""
        attributes = {k: v for k, v in data.items() if k not in ("id", kind.name_field)}
        resource_id = data.get("id")
        return cls(
            name=str(data.get(kind.name_field) or ""),
            id=str(resource_id) if resource_id is not None else None,
            attributes=attributes,
        )

    def to_dict(self, kind: ResourceKind) -> Dict[str, Any]:
        """Convert back to the service document shape."""
        data: Dict[str, Any] = {}
        if self.id is not None:
            data["id"] = self.id
        data[kind.name_field] = self.name
        data.update(self.attributes)
        return data


@dataclass
class ResourceList:
    """Collection envelope ``{total, <items>}``."""
    total: int
    items: List[Resource] = field(default_factory=list)


def unwrap_document(document: Any) -> Any:
    """Return the payload of a ``{kind, apiVersion, data}`` envelope, or the document itself."""
    if isinstance(document, dict) and "data" in document and "kind" in document:
        return document["data"]
    return document


def wrap_document(kind: ResourceKind, data: Any) -> Dict[str, Any]:
    """Wrap a payload in the resource envelope written by ``get`` and ``--boilerplate``."""
    return {
        "kind": kind.document_kind,
        "apiVersion": RESOURCE_API_VERSION,
        "data": data,
    }


def _json_object(resp, label: str) -> Dict[str, Any]:
    try:
        data = resp.json()
    except ValueError as e:
        raise MalformedResponseError(f"unable to parse the {label} response; err={e}") from e
    if not isinstance(data, dict):
        raise MalformedResponseError(f"the {label} response is not a JSON object")
    return data


class ResourceClient:
    """CRUD operations for one resource kind.

    Usage:
        resources = ResourceClient(API_CLIENT, VerifyClient())
        resource_id = resources.create(session, {"clientName": "app1", "entitlements": ["read"]})
        resource, url = resources.get(session, name="app1")
    """

    def __init__(self, kind: ResourceKind, client: Optional[VerifyClient] = None):
        """Initialize the resource client.

        Args:
            kind: Resource kind description
            client: HTTP client (a default one when omitted)
        """
        self.kind = kind
        self.client = client or VerifyClient()

    def _call(
        self,
        session: Session,
        action: str,
        method: str,
        path: str,
        expected: int,
        params: Optional[Dict[str, Any]] = None,
        body: Any = None,
    ):
        """Send one request and raise the classified error unless ``expected`` came back.

        Returns:
            Tuple of (response, request URL)
        """
        prepared = build_request(session, method, path, params=params, body=body)
        resp = self.client.send(prepared)
        error = classify(resp, expected=expected, default_message=f"unable to {action} the {self.kind.label}")
        if error is not None:
            logger.error("unable to %s the %s; err=%s", action, self.kind.label, error)
            raise error
        return resp, prepared.url

    def resolve_id(self, session: Session, name: str) -> str:
        """Resolve a resource name to its ID with one search round trip."""
        return resolve_id(
            self.client,
            session,
            self.kind.collection_path,
            self.kind.collection_field,
            self.kind.name_field,
            name,
        )

    def _target_id(self, session: Session, name: Optional[str], resource_id: Optional[str]) -> str:
        if resource_id:
            return resource_id
        if not name:
            raise ValidationError(self.kind.name_field, "a resource name or ID is required")
        return self.resolve_id(session, name)

    def create(self, session: Session, document: Any) -> str:
        """Create a resource.

        Args:
            session: Tenant session
            document: Resource document (bare or enveloped)

        Returns:
            Service-assigned ID, the Location header, or the kind's success message

        Raises:
            ValidationError: If required fields are missing (nothing is sent)
            ClassifiedError: If the service does not answer 201
        """
        document = self.kind.validate(unwrap_document(document))
        resp, _ = self._call(session, "create", "POST", self.kind.collection_path, 201, body=document)

        try:
            body = resp.json()
        except ValueError:
            body = None
        resource_id = body.get("id") if isinstance(body, dict) else None

        logger.info("created %s '%s'", self.kind.label, document[self.kind.name_field])
        if resource_id:
            return str(resource_id)
        return resp.headers.get("Location") or self.kind.created_message

    def get(
        self,
        session: Session,
        name: Optional[str] = None,
        resource_id: Optional[str] = None,
    ) -> Tuple[Resource, str]:
        """Fetch one resource by ID, or by name with a resolution round trip first.

        Returns:
            Tuple of (resource, request URL used)
        """
        resource_id = self._target_id(session, name, resource_id)
        resp, url = self._call(session, "get", "GET", self.kind.item_path(resource_id), 200)
        return Resource.from_dict(self.kind, _json_object(resp, self.kind.label)), url

    def list(
        self,
        session: Session,
        sort: Optional[str] = None,
        count: Optional[str] = None,
    ) -> Tuple[ResourceList, str]:
        """List resources with optional ``sort`` and ``count`` parameters.

        Returns:
            Tuple of (resource list, request URL used)
        """
        params = {"sort": sort or None, "count": str(count) if count else None}
        resp, url = self._call(session, "list", "GET", self.kind.collection_path, 200, params=params)

        items = parse_collection(resp, self.kind.collection_field)
        if not all(isinstance(i, dict) for i in items):
            raise MalformedResponseError(f"the list response has no valid '{self.kind.collection_field}' list")

        total = resp.json().get("total")
        resources = ResourceList(
            total=total if isinstance(total, int) else len(items),
            items=[Resource.from_dict(self.kind, item) for item in items],
        )
        return resources, url

    def update(self, session: Session, document: Any) -> None:
        """Replace a resource with the full document (PUT, no merge).

        The ID comes from the document when present, otherwise from its name.
        """
        document = self.kind.validate(unwrap_document(document))
        resource_id = document.get("id")
        if resource_id is None or resource_id == "":
            resource_id = None
        elif isinstance(resource_id, int) and not isinstance(resource_id, bool):
            # YAML reads unquoted numeric IDs as ints.
            resource_id = str(resource_id)
        elif not isinstance(resource_id, str):
            raise ValidationError("id", "id must be a string")
        resource_id = self._target_id(session, document[self.kind.name_field], resource_id)

        self._call(session, "update", "PUT", self.kind.item_path(resource_id), 204, body=document)
        logger.info("updated %s '%s'", self.kind.label, document[self.kind.name_field])

    def delete(self, session: Session, name: Optional[str] = None, resource_id: Optional[str] = None) -> None:
        """Delete a resource by name (resolved first) or ID."""
        resource_id = self._target_id(session, name, resource_id)
        self._call(session, "delete", "DELETE", self.kind.item_path(resource_id), 204)
        logger.info("deleted %s %s", self.kind.label, name or resource_id)
