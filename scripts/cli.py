"""verifyctl command-line entry point.

This module is a thin CLI wrapper around verifyctl.core.verify services: it
parses arguments, loads the session store, and renders results or errors.
"""
from __future__ import annotations
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import yaml

from verifyctl.config import CLIConfig, CLISettings, load_settings
from verifyctl.core.verify import (
    RESOURCE_KINDS,
    ResourceClient,
    VerifyClient,
    VerifyError,
    get_resource_client,
    wrap_document,
)

ENTITLEMENTS_MESSAGE = "Choose any of the following entitlements to configure your application or API client:\n"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logger = logging.getLogger("verifyctl")


def setup_logging(settings: CLISettings) -> None:
    """Send log records to the CLI log file; the terminal only gets command output."""
    root = logging.getLogger()
    root.setLevel(settings.log_level)
    target = str(settings.log_file.resolve())
    if any(getattr(h, "baseFilename", None) == target for h in root.handlers):
        return

    settings.log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(settings.log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="verifyctl", description="Manage resources on a Verify tenant")
    sub = parser.add_subparsers(dest="cmd")
    kinds = sorted(RESOURCE_KINDS)

    login = sub.add_parser("login", help="Log in to a tenant with API client credentials")
    login.add_argument("tenant", help="Tenant hostname, e.g. abc.verify.ibm.com")
    login.add_argument("--client-id", required=True)
    login.add_argument("--client-secret", help="Defaults to VERIFY_CLIENT_SECRET or /run/secrets/verify_client_secret")

    use = sub.add_parser("use", help="Switch the current tenant")
    use.add_argument("tenant")

    logout = sub.add_parser("logout", help="Forget the session for a tenant (the current one by default)")
    logout.add_argument("tenant", nargs="?")

    create = sub.add_parser("create", help="Create a resource from a YAML/JSON file")
    create.add_argument("kind", choices=kinds)
    create.add_argument("-f", "--file", help="Path to the yaml file containing resource data")
    create.add_argument("--boilerplate", action="store_true", help="Print an empty resource file")
    create.add_argument("--entitlements", action="store_true", help="Print the entitlements required")

    get = sub.add_parser("get", help="Get a resource by name or ID")
    get.add_argument("kind", choices=kinds)
    get.add_argument("--name")
    get.add_argument("--id", dest="resource_id")
    get.add_argument("-o", "--output", choices=["yaml", "json"], default="yaml")

    lst = sub.add_parser("list", help="List resources")
    lst.add_argument("kind", choices=kinds)
    lst.add_argument("--sort", help="Sort expression, e.g. '+clientName'")
    lst.add_argument("--count", help="Maximum number of results")
    lst.add_argument("-o", "--output", choices=["yaml", "json"], default="yaml")

    update = sub.add_parser("update", help="Replace a resource from a YAML/JSON file")
    update.add_argument("kind", choices=kinds)
    update.add_argument("-f", "--file", required=True)

    delete = sub.add_parser("delete", help="Delete a resource by name or ID")
    delete.add_argument("kind", choices=kinds)
    delete.add_argument("--name")
    delete.add_argument("--id", dest="resource_id")

    return parser


def read_document(path: str) -> Any:
    """Read a YAML or JSON resource file (JSON is valid YAML)."""
    return yaml.safe_load(Path(path).read_text(encoding="utf-8"))


def render(data: Any, output: str) -> str:
    if output == "json":
        return json.dumps(data, indent=2, ensure_ascii=False)
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False, allow_unicode=True).rstrip("\n")


def _login(args: argparse.Namespace, settings: CLISettings, config: CLIConfig, client: VerifyClient) -> str:
    secret = settings.client_secret(args.client_secret)
    if not secret:
        raise VerifyError("Missing API client secret. Use --client-secret or set VERIFY_CLIENT_SECRET.")
    session = client.login(args.tenant, args.client_id, secret)
    config.add_or_replace(session)
    config.set_current_tenant(session.tenant)
    config.persist()
    return f"Login succeeded for {session.tenant}"


def _use(args: argparse.Namespace, config: CLIConfig) -> str:
    config.set_current_tenant(args.tenant)
    # Fail now rather than on the next resource command.
    config.current_session()
    config.persist()
    return f"Current tenant set to {args.tenant}"


def _logout(args: argparse.Namespace, config: CLIConfig) -> str:
    tenant = args.tenant or config.current_session().tenant
    if not config.remove(tenant):
        raise VerifyError(f"No login session for {tenant}")
    config.persist()
    return f"Logged out of {tenant}"


def _run_resource_command(args: argparse.Namespace, config: CLIConfig, resources: ResourceClient) -> str:
    kind = resources.kind

    if args.cmd == "create":
        if args.entitlements:
            return ENTITLEMENTS_MESSAGE + "\n".join(f"  {e}" for e in kind.entitlements)
        if args.boilerplate:
            return render(wrap_document(kind, dict(kind.boilerplate)), "yaml")
        if not args.file:
            raise VerifyError("The 'file' option is required if no other options are used.")

    if args.cmd in ("get", "delete") and not (args.name or args.resource_id):
        raise VerifyError("Either --name or --id is required.")

    document = read_document(args.file) if args.cmd in ("create", "update") else None
    session = config.current_session()

    if args.cmd == "create":
        return "Resource created: " + resources.create(session, document)
    if args.cmd == "get":
        resource, url = resources.get(session, name=args.name, resource_id=args.resource_id)
        logger.debug("fetched %s from %s", kind.label, url)
        return render(wrap_document(kind, resource.to_dict(kind)), args.output)
    if args.cmd == "list":
        listing, url = resources.list(session, sort=args.sort, count=args.count)
        logger.debug("listed %s from %s", kind.label, url)
        data = {"total": listing.total, kind.collection_field: [r.to_dict(kind) for r in listing.items]}
        return render(wrap_document(kind, data), args.output)
    if args.cmd == "update":
        resources.update(session, document)
        return "Resource updated successfully"
    resources.delete(session, name=args.name, resource_id=args.resource_id)
    return f"Resource '{args.name or args.resource_id}' deleted successfully"


def main(argv: Optional[list[str]] = None) -> None:
    """Command-line entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.cmd:
        parser.print_help()
        return

    try:
        settings = load_settings()
    except ValueError as e:
        parser.error(str(e))
    setup_logging(settings)

    try:
        config = CLIConfig.load(settings.config_file)
        client = VerifyClient(timeout=settings.request_timeout)

        if args.cmd == "login":
            message = _login(args, settings, config, client)
        elif args.cmd == "use":
            message = _use(args, config)
        elif args.cmd == "logout":
            message = _logout(args, config)
        else:
            message = _run_resource_command(args, config, get_resource_client(args.kind, client))
    except VerifyError as e:
        logger.error("%s failed; kind=%s, err=%s", args.cmd, e.kind, e)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error("%s failed; err=%s", args.cmd, e)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(message)


if __name__ == "__main__":
    main()
