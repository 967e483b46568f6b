"""Resolve human-readable resource names to service identifiers."""
from __future__ import annotations
import logging
from typing import Any

from .classifier import raise_for_response
from .client import VerifyClient
from .exceptions import AmbiguousNameError, MalformedResponseError, NotFoundError
from .sessions import Session

logger = logging.getLogger(__name__)


def search_filter(filter_field: str, name: str) -> str:
    """Return the equality expression ``field = "name"`` used by ``search``."""
    escaped = name.replace("\\", "\\\\").replace('"', '\\"')
    return f'{filter_field} = "{escaped}"'


def parse_collection(resp, collection_field: str) -> list:
    """Return the ``collection_field`` list of a collection response body."""
    try:
        data: Any = resp.json()
    except ValueError as e:
        raise MalformedResponseError(f"failed to parse response: {e}") from e
    if not isinstance(data, dict):
        raise MalformedResponseError("collection response is not a JSON object")

    resources = data.get(collection_field)
    if not isinstance(resources, list):
        raise MalformedResponseError(f"collection response has no '{collection_field}' list")
    return resources


def resolve_id(
    client: VerifyClient,
    session: Session,
    collection_path: str,
    collection_field: str,
    filter_field: str,
    name: str,
) -> str:
    """Look up the ID of the single resource named ``name``.

    Args:
        client: Client used for the search round trip
        session: Tenant session
        collection_path: Collection endpoint (e.g. "v2.0/identitysources")
        collection_field: Response field holding the results (e.g. "identitySources")
        filter_field: Resource field compared against ``name`` (e.g. "instanceName")
        name: Name to resolve

    Returns:
        Service-assigned resource ID

    Raises:
        NotFoundError: If nothing matches
        AmbiguousNameError: If more than one resource matches
        MalformedResponseError: If the response does not have the expected shape
    """
    resp = client.request(
        session,
        "GET",
        collection_path,
        params={"search": search_filter(filter_field, name)},
    )
    raise_for_response(resp, expected=200, default_message=f"unable to search for '{name}'")

    resources = parse_collection(resp, collection_field)
    if not resources:
        raise NotFoundError(f"no resource found with {filter_field} '{name}'", name=name)
    if len(resources) > 1:
        logger.error("name '%s' matched %d resources in %s", name, len(resources), collection_path)
        raise AmbiguousNameError(name, len(resources))

    match = resources[0]
    if not isinstance(match, dict):
        raise MalformedResponseError("invalid resource format")
    resource_id = match.get("id")
    if not isinstance(resource_id, str) or not resource_id:
        raise MalformedResponseError("ID not found or invalid type")

    logger.debug("resolved %s '%s' to %s", filter_field, name, resource_id)
    return resource_id
