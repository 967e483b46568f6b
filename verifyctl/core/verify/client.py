"""Low-level HTTP client for the Verify tenant APIs.

Builds authenticated requests, sends them, and obtains client-credential
tokens. Building is kept separate from sending so requests can be checked
without any network I/O.
"""
from __future__ import annotations
import json
import logging
from typing import Optional, Dict, Any

import requests

from .sessions import Session
from .classifier import raise_for_response
from .exceptions import EncodingError, MalformedResponseError, TransportError

REQUEST_TIMEOUT = 30
TOKEN_PATH = "v1.0/endpoint/default/token"

logger = logging.getLogger(__name__)


def tenant_url(tenant: str, path: str = "") -> str:
    """Return ``https://{tenant}/{path}``."""
    return f"https://{tenant}/{path.lstrip('/')}"


def build_request(
    session: Session,
    method: str,
    path: str,
    params: Optional[Dict[str, Any]] = None,
    body: Any = None,
) -> requests.PreparedRequest:
    """Build a fully authenticated request for a tenant API path.

    Args:
        session: Tenant session providing host and bearer token
        method: HTTP method
        path: API path relative to the tenant root (e.g. "v2.0/identitysources")
        params: Query parameters; ``None`` values are dropped
        body: JSON-serializable payload, sent unchanged

    Returns:
        Prepared request, not yet sent

    Raises:
        EncodingError: If the body cannot be encoded as JSON
    """
    headers = {
        "Accept": "application/json",
        "Authorization": f"Bearer {session.token}",
    }
    data = None
    if body is not None:
        try:
            data = json.dumps(body, ensure_ascii=False, allow_nan=False).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise EncodingError(f"unable to encode request body; err={e}") from e
        headers["Content-Type"] = "application/json"

    query = {k: v for k, v in (params or {}).items() if v is not None}
    request = requests.Request(
        method.upper(),
        tenant_url(session.tenant, path),
        headers=headers,
        params=query or None,
        data=data,
    )
    return request.prepare()


class VerifyClient:
    """Sends prepared requests to a tenant.

    Usage:
        client = VerifyClient(timeout=10)
        prepared = build_request(session, "GET", "v1.0/apiclients")
        resp = client.send(prepared)
    """

    def __init__(self, http: Optional[requests.Session] = None, timeout: float = REQUEST_TIMEOUT):
        """Initialize the client.

        Args:
            http: HTTP session used for every round trip (a new one when omitted)
            timeout: Per-request timeout in seconds
        """
        self.http = http or requests.Session()
        self.timeout = timeout

    def send(self, prepared: requests.PreparedRequest) -> requests.Response:
        """Perform a single round trip. Failures are never retried.

        Raises:
            TransportError: If no HTTP response was received
        """
        logger.debug("%s %s", prepared.method, prepared.url)
        try:
            resp = self.http.send(prepared, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("unable to reach %s; err=%s", prepared.url, e)
            raise TransportError(f"unable to reach {prepared.url}; err={e}") from e
        logger.debug("%s %s -> %s", prepared.method, prepared.url, resp.status_code)
        return resp

    def request(
        self,
        session: Session,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        body: Any = None,
    ) -> requests.Response:
        """Build and send a request in one step."""
        return self.send(build_request(session, method, path, params=params, body=body))

    def get_client_credentials_token(self, tenant: str, client_id: str, client_secret: str) -> str:
        """Fetch an access token using the client credentials flow.

        Raises:
            ClassifiedError: If the token endpoint rejects the credentials
            MalformedResponseError: If the response carries no access token
        """
        prepared = requests.Request(
            "POST",
            tenant_url(tenant, TOKEN_PATH),
            headers={"Accept": "application/json"},
            data={
                "grant_type": "client_credentials",
                "client_id": client_id,
                "client_secret": client_secret,
            },
        ).prepare()
        resp = self.send(prepared)
        raise_for_response(resp, expected=200, default_message="unable to get an access token")

        try:
            token = resp.json().get("access_token")
        except (ValueError, AttributeError) as e:
            raise MalformedResponseError(f"unable to parse the token response; err={e}") from e
        if not isinstance(token, str) or not token:
            raise MalformedResponseError("token response has no access_token")
        return token

    def login(self, tenant: str, client_id: str, client_secret: str) -> Session:
        """Authenticate as an API client and return the new machine session."""
        token = self.get_client_credentials_token(tenant, client_id, client_secret)
        logger.info("logged in to %s as client %s", tenant, client_id)
        return Session(tenant=tenant, token=token, is_user=False)
