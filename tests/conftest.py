"""Pytest shared fixtures for the resource access layer."""
import json
import pathlib
import re
import sys
import uuid
from typing import Optional
from unittest.mock import MagicMock
from urllib.parse import parse_qs, urlsplit

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import requests

from verifyctl.core.verify import Session, VerifyClient

TENANT = "t.example.com"
SEARCH_RE = re.compile(r'^(\w+) = "((?:[^"\\]|\\.)*)"$')


def make_response(status_code: int = 200, payload=None, text: Optional[str] = None, headers: Optional[dict] = None):
    """Helper to craft real requests responses without a network."""
    resp = requests.Response()
    resp.status_code = status_code
    if text is None and payload is not None:
        text = json.dumps(payload)
    resp._content = (text or "").encode("utf-8")
    resp.encoding = "utf-8"
    resp.headers.update(headers or {})
    return resp


@pytest.fixture
def session():
    return Session(tenant=TENANT, token="abc", is_user=False)


@pytest.fixture
def http():
    """Stand-in for requests.Session; queue responses on ``http.send.side_effect``."""
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(http):
    return VerifyClient(http=http, timeout=5)


def sent_requests(http):
    """Prepared requests passed to ``http.send`` in call order."""
    return [call.args[0] for call in http.send.call_args_list]


# ─────────────────────────────────────────────────────────────────────────────
# In-memory tenant
# ─────────────────────────────────────────────────────────────────────────────
class FakeTenant:
    """Tiny in-memory implementation of one collection endpoint.

    Understands POST/GET on the collection (with ``search``), and
    GET/PUT/DELETE on items. Every prepared request is recorded.
    """

    def __init__(self, collection_path: str, collection_field: str, name_field: str):
        self.collection_path = "/" + collection_path
        self.collection_field = collection_field
        self.name_field = name_field
        self.items: dict[str, dict] = {}
        self.requests: list[requests.PreparedRequest] = []

    def send(self, prepared, timeout=None):
        self.requests.append(prepared)
        parts = urlsplit(prepared.url)
        if prepared.headers.get("Authorization") != "Bearer abc":
            return make_response(401, text="")

        if parts.path == self.collection_path:
            if prepared.method == "POST":
                return self._create(prepared)
            return self._search(parse_qs(parts.query))

        if parts.path.startswith(self.collection_path + "/"):
            resource_id = parts.path[len(self.collection_path) + 1:]
            if resource_id not in self.items:
                return make_response(404, payload={"messageId": "CSIAH0001E", "messageDescription": "Not found"})
            if prepared.method == "GET":
                return make_response(200, payload=self.items[resource_id])
            if prepared.method == "PUT":
                self.items[resource_id] = {**json.loads(prepared.body), "id": resource_id}
                return make_response(204)
            if prepared.method == "DELETE":
                del self.items[resource_id]
                return make_response(204)
        return make_response(404)

    def _create(self, prepared):
        document = json.loads(prepared.body)
        resource_id = uuid.uuid4().hex[:8]
        self.items[resource_id] = {**document, "id": resource_id}
        return make_response(201, payload={"id": resource_id})

    def _search(self, query):
        items = list(self.items.values())
        if "search" in query:
            match = SEARCH_RE.match(query["search"][0])
            assert match, f"unexpected search expression {query['search'][0]!r}"
            field, value = match.group(1), re.sub(r"\\(.)", r"\1", match.group(2))
            items = [i for i in items if i.get(field) == value]
        return make_response(200, payload={"total": len(items), self.collection_field: items})

    def add(self, document: dict) -> str:
        resource_id = uuid.uuid4().hex[:8]
        self.items[resource_id] = {**document, "id": resource_id}
        return resource_id


@pytest.fixture
def fake_tenant():
    """In-memory API client collection."""
    return FakeTenant("v1.0/apiclients", "apiClients", "clientName")


@pytest.fixture
def tenant_client(fake_tenant):
    """VerifyClient wired to the in-memory tenant."""
    return VerifyClient(http=fake_tenant, timeout=5)


@pytest.fixture
def response():
    """Factory fixture wrapping ``make_response``."""
    return make_response


@pytest.fixture
def sent():
    """Factory fixture wrapping ``sent_requests``."""
    return sent_requests
