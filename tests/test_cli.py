import json
import logging

import pytest
import yaml

import scripts.cli as cli
from verifyctl.config.cli_config import CLIConfig
from verifyctl.core.verify import Session, VerifyClient


@pytest.fixture(autouse=True)
def cli_env(monkeypatch, tmp_path):
    """Point the CLI at a throwaway config dir and undo its logging setup."""
    monkeypatch.setenv("VERIFYCTL_CONFIG_DIR", str(tmp_path / "verify"))
    monkeypatch.delenv("VERIFY_CLIENT_SECRET", raising=False)
    monkeypatch.delenv("VERIFYCTL_TIMEOUT", raising=False)
    monkeypatch.delenv("VERIFYCTL_LOG_LEVEL", raising=False)
    monkeypatch.delenv("VERIFYCTL_LOG_FILE", raising=False)
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield tmp_path / "verify"
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture
def logged_in(cli_env):
    config = CLIConfig(path=cli_env / "config")
    config.add_or_replace(Session("t.example.com", "abc"))
    config.set_current_tenant("t.example.com")
    config.persist()
    return config


@pytest.fixture
def wired(monkeypatch, fake_tenant):
    """Route every CLI request to the in-memory tenant."""
    monkeypatch.setattr(cli, "VerifyClient", lambda timeout: VerifyClient(http=fake_tenant, timeout=timeout))
    return fake_tenant


def write_file(tmp_path, name, data):
    path = tmp_path / name
    path.write_text(yaml.safe_dump(data) if name.endswith(".yaml") else json.dumps(data))
    return str(path)


def test_no_command_prints_help(capsys):
    cli.main([])
    assert "usage: verifyctl" in capsys.readouterr().out


def test_login_persists_session(monkeypatch, cli_env, capsys):
    calls = []

    class FakeClient:
        def __init__(self, timeout):
            self.timeout = timeout

        def login(self, tenant, client_id, client_secret):
            calls.append((tenant, client_id, client_secret, self.timeout))
            return Session(tenant, "new-token", is_user=False)

    monkeypatch.setattr(cli, "VerifyClient", FakeClient)
    monkeypatch.setenv("VERIFY_CLIENT_SECRET", "super-secret")

    cli.main(["login", "t.example.com", "--client-id", "cid"])

    assert calls == [("t.example.com", "cid", "super-secret", 30.0)]
    stored = yaml.safe_load((cli_env / "config").read_text())
    assert stored["tenant"] == "t.example.com"
    assert stored["auth"] == [{"tenant": "t.example.com", "token": "new-token", "isUser": False}]
    assert "Login succeeded" in capsys.readouterr().out
    assert (cli_env / "verifyctl.log").exists()


def test_login_requires_secret(monkeypatch, capsys):
    """CLI must abort before calling the tenant if the client secret is absent."""

    class FailingClient:
        def __init__(self, timeout):
            pass

        def login(self, *args):
            raise AssertionError("login should not be invoked when the secret is missing")

    monkeypatch.setattr(cli, "VerifyClient", FailingClient)
    monkeypatch.setattr(cli.CLISettings, "client_secret", lambda self, explicit=None: explicit)

    with pytest.raises(SystemExit) as exc:
        cli.main(["login", "t.example.com", "--client-id", "cid"])
    assert exc.value.code == 1
    assert "Missing API client secret" in capsys.readouterr().err


def test_resource_command_without_session(wired, capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["list", "apiclient"])
    assert exc.value.code == 1
    assert "No login session available" in capsys.readouterr().err
    assert wired.requests == []


def test_create_get_list_delete(wired, logged_in, tmp_path, capsys):
    path = write_file(tmp_path, "client.yaml", {
        "kind": "IBMVerifyApiClient",
        "apiVersion": "1.0",
        "data": {"clientName": "app1", "entitlements": ["read"]},
    })

    cli.main(["create", "apiclient", "-f", path])
    (resource_id,) = wired.items
    assert capsys.readouterr().out.strip() == f"Resource created: {resource_id}"

    cli.main(["get", "apiclient", "--name", "app1", "-o", "json"])
    printed = json.loads(capsys.readouterr().out)
    assert printed["kind"] == "IBMVerifyApiClient"
    assert printed["data"] == {"id": resource_id, "clientName": "app1", "entitlements": ["read"]}

    cli.main(["list", "apiclient", "--count", "10"])
    listing = yaml.safe_load(capsys.readouterr().out)
    assert listing["data"]["total"] == 1
    assert listing["data"]["apiClients"][0]["clientName"] == "app1"

    cli.main(["delete", "apiclient", "--name", "app1"])
    assert "deleted successfully" in capsys.readouterr().out
    assert wired.items == {}

    with pytest.raises(SystemExit) as exc:
        cli.main(["delete", "apiclient", "--name", "app1"])
    assert exc.value.code == 1
    assert "app1" in capsys.readouterr().err


def test_update_from_json_file(wired, logged_in, tmp_path, capsys):
    resource_id = wired.add({"clientName": "app1", "entitlements": ["read"]})
    path = write_file(tmp_path, "client.json", {"clientName": "app1", "entitlements": ["write"]})

    cli.main(["update", "apiclient", "-f", path])

    assert capsys.readouterr().out.strip() == "Resource updated successfully"
    assert wired.items[resource_id]["entitlements"] == ["write"]


def test_create_validation_error_sends_nothing(wired, logged_in, tmp_path, capsys):
    path = write_file(tmp_path, "client.yaml", {"clientName": "app1"})

    with pytest.raises(SystemExit):
        cli.main(["create", "apiclient", "-f", path])

    assert "entitlements list is required" in capsys.readouterr().err
    assert wired.requests == []


def test_create_requires_file(wired, logged_in, capsys):
    with pytest.raises(SystemExit):
        cli.main(["create", "apiclient"])
    assert "'file' option is required" in capsys.readouterr().err


def test_missing_file_is_reported(wired, logged_in, tmp_path, capsys):
    with pytest.raises(SystemExit):
        cli.main(["update", "identitysource", "-f", str(tmp_path / "missing.yaml")])
    assert "missing.yaml" in capsys.readouterr().err


def test_boilerplate_needs_no_session(capsys):
    cli.main(["create", "identitysource", "--boilerplate"])
    document = yaml.safe_load(capsys.readouterr().out)
    assert document["kind"] == "IBMVerifyIdentitySource"
    assert document["apiVersion"] == "1.0"
    assert document["data"]["instanceName"] == ""


def test_entitlements(capsys):
    cli.main(["create", "apiclient", "--entitlements"])
    assert "Manage API Clients" in capsys.readouterr().out


def test_use_and_logout(logged_in, cli_env, capsys):
    with pytest.raises(SystemExit):
        cli.main(["use", "other.example.com"])
    assert "No login session available" in capsys.readouterr().err

    cli.main(["use", "t.example.com"])
    cli.main(["logout"])
    stored = yaml.safe_load((cli_env / "config").read_text())
    assert stored["tenant"] == ""
    assert stored["auth"] == []
