"""Command-line interface for the push gateway.

Commands
--------
serve
    Start the HTTP server under Granian.
lint-taxonomy
    Validate a taxonomy file and optionally export its JSON Schema.
mkpasswd
    Print a bcrypt hash for the auth file.
login
    Establish Perforce trust and a ticket for the gateway's user.

"""

from __future__ import annotations

import getpass
import os
import sys
import typing as typ
from pathlib import Path

from cyclopts import App, Parameter

from datapushgateway import __version__
from datapushgateway.auth.credentials import DEFAULT_BCRYPT_ROUNDS, hash_password
from datapushgateway.errors import ConfigError
from datapushgateway.sync.errors import SyncToolError
from datapushgateway.taxonomy.loader import load_taxonomy
from datapushgateway.taxonomy.schema import write_taxonomy_schema

DEFAULT_APPLICATION_CONFIG = Path("config.yaml")

app = App(
    name="datapushgateway",
    help="Ingest monitoring records into per-customer Markdown reports",
    version=__version__,
)


def _export(name: str, value: object | None) -> None:
    if value is not None:
        os.environ[name] = str(value)


@app.command
def serve(
    *,
    host: typ.Annotated[
        str, Parameter(env_var="DATAPUSHGATEWAY_HOST")
    ] = "0.0.0.0",  # noqa: S104 - bind all interfaces for container
    port: typ.Annotated[int, Parameter(env_var="DATAPUSHGATEWAY_PORT")] = 9092,
    data_dir: typ.Annotated[
        Path | None, Parameter(env_var="DATAPUSHGATEWAY_DATA_DIR")
    ] = None,
    taxonomy: typ.Annotated[
        Path | None, Parameter(env_var="DATAPUSHGATEWAY_TAXONOMY_PATH")
    ] = None,
    auth_file: typ.Annotated[
        Path | None,
        Parameter(
            name=["--auth-file", "--auth.file"],
            env_var="DATAPUSHGATEWAY_AUTH_FILE",
        ),
    ] = None,
    config: typ.Annotated[
        Path | None, Parameter(env_var="DATAPUSHGATEWAY_CONFIG")
    ] = None,
    debug: bool = False,
) -> int:
    """Start the push gateway HTTP server.

    Args:
        host: Bind address.
        port: Listen port.
        data_dir: Root of the per-customer workspaces.
        taxonomy: Tag taxonomy YAML.
        auth_file: Basic-auth YAML; without it only health routes are served.
        config: Application config holding the Perforce settings.
        debug: Log at DEBUG, including every Perforce invocation.

    Returns:
        Exit code (0 after the server stops).

    """
    from datapushgateway.runtime import main as run_server

    _export("DATAPUSHGATEWAY_HOST", host)
    _export("DATAPUSHGATEWAY_PORT", port)
    _export("DATAPUSHGATEWAY_DATA_DIR", data_dir)
    _export("DATAPUSHGATEWAY_TAXONOMY_PATH", taxonomy)
    _export("DATAPUSHGATEWAY_AUTH_FILE", auth_file)
    _export("DATAPUSHGATEWAY_CONFIG", config)
    if debug:
        os.environ["DATAPUSHGATEWAY_LOG_LEVEL"] = "DEBUG"

    run_server()
    return 0


@app.command
def lint_taxonomy(path: Path, *, schema_out: Path | None = None) -> int:
    """Validate a taxonomy file.

    Args:
        path: Taxonomy YAML to validate.
        schema_out: Optional path to write the generated JSON Schema.

    Returns:
        Exit code: 0 on success, 1 when validation fails.

    """
    try:
        taxonomy = load_taxonomy(path)
    except ConfigError as exc:
        print(f"Taxonomy validation failed for {path}:")
        for issue in exc.issues:
            print(f"  - {issue}")
        return 1

    if schema_out is not None:
        write_taxonomy_schema(schema_out)

    tags = {tag for entry in taxonomy.entries for tag in entry.monitor_tags}
    print(
        f"taxonomy {path} is valid "
        f"({len(taxonomy.entries)} documents / {len(tags)} monitor tags)"
    )
    return 0


@app.command
def mkpasswd(*, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> int:
    """Prompt for a password and print its bcrypt hash.

    Args:
        rounds: bcrypt cost factor.

    Returns:
        Exit code: 0 on success, 1 when the entries differ or are empty.

    """
    password = getpass.getpass("Enter Password: ")
    if password != getpass.getpass("Confirm Password: "):
        print("Passwords do not match.", file=sys.stderr)
        return 1
    try:
        hashed = hash_password(password, rounds=rounds)
    except ValueError as exc:
        print(f"Cannot hash password: {exc}", file=sys.stderr)
        return 1
    print(hashed)
    return 0


@app.command
def login(
    *,
    config: typ.Annotated[
        Path, Parameter(env_var="DATAPUSHGATEWAY_CONFIG")
    ] = DEFAULT_APPLICATION_CONFIG,
    timeout: float = 60.0,
) -> int:
    """Establish Perforce trust and a ticket for the gateway's user.

    Args:
        config: Application config holding the Perforce settings.
        timeout: Upper bound in seconds for each ``p4`` invocation.

    Returns:
        Exit code: 0 when a valid session exists, 1 otherwise.

    """
    from datapushgateway.sync.config import load_perforce_config
    from datapushgateway.sync.perforce import PerforceSyncTool

    try:
        tool = PerforceSyncTool(load_perforce_config(config), timeout_s=timeout)
        if tool.ensure_trust():
            print("Accepted the Perforce server fingerprint.")
        if tool.is_logged_in() and tool.has_valid_ticket():
            print("Already logged in to Perforce.")
            return 0
        tool.login(getpass.getpass("Enter Perforce password: "))
    except (ConfigError, SyncToolError) as exc:
        print(f"Perforce login failed: {exc}", file=sys.stderr)
        return 1

    print("Logged in to Perforce.")
    return 0


def main() -> int:
    """Entry point for the CLI."""
    return app()


if __name__ == "__main__":
    sys.exit(main())
