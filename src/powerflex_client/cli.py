"""Command-line interface for interacting with PowerFlex gateways."""
from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from .client import PowerFlexClient
from .cli_schema import CLI_TABLE_VIEWS, TableView
from .exceptions import APIError, PowerFlexError

app = typer.Typer(help="PowerFlex storage management CLI.", no_args_is_help=True)

systems_app = typer.Typer(help="System operations.")
volumes_app = typer.Typer(help="Volume operations.")
app.add_typer(systems_app, name="systems")
app.add_typer(volumes_app, name="volumes")

console = Console(force_terminal=False, color_system=None)


def _build_client(
    endpoint: str,
    username: str | None,
    password: str | None,
    version: str | None,
    insecure: bool,
    use_certs: bool,
    cert_path: Path | None,
    timeout: float,
    show_http: bool,
) -> tuple[PowerFlexClient, str, str]:
    if not username or not password:
        raise typer.BadParameter("--username and --password are required.")

    verify_target: bool | str
    if cert_path:
        expanded_cert = cert_path.expanduser()
        if not expanded_cert.exists():
            raise typer.BadParameter("Certificate file not found for --cert option.")
        if insecure:
            raise typer.BadParameter("Cannot combine --cert with --insecure.")
        verify_target = str(expanded_cert)
    else:
        verify_target = not insecure

    client = PowerFlexClient(
        endpoint=endpoint,
        version=version,
        verify_ssl=verify_target,
        use_certs=use_certs,
        timeout=timeout,
        show_http=show_http,
    )
    return client, username, password


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2))


def _render_rich_table(view: TableView, rows: Sequence[Mapping[str, Any]]) -> None:
    table = Table(title=view.title, box=box.SIMPLE, show_lines=False, header_style="bold cyan")
    for column in view.columns:
        table.add_column(column.header, justify=column.justify)
    ordered_rows = list(rows)
    if view.sort_key:
        ordered_rows.sort(key=view.sort_key)
    for row in ordered_rows:
        table.add_row(*(column.render(row) for column in view.columns))
    console.print(table)


def _present_output(payload: Any, *, view_id: str, json_output: bool) -> None:
    view = CLI_TABLE_VIEWS.get(view_id)
    if json_output or view is None or not isinstance(payload, list):
        _echo_json(payload)
        return
    rows = [item for item in payload if isinstance(item, Mapping)]
    if not rows:
        _echo_json(payload)
        return
    _render_rich_table(view, rows)


def _handle_error(exc: PowerFlexError) -> None:
    if isinstance(exc, APIError) and exc.status_code is not None:
        message = f"Request failed (status {exc.status_code}): {exc}"
    else:
        message = f"Request failed: {exc}"
    typer.secho(message, err=True, fg=typer.colors.RED)
    raise typer.Exit(code=1)


def _shared_options() -> dict[str, Any]:  # pragma: no cover - helper indirection
    return {
        "endpoint": typer.Option(
            ..., "--endpoint", "-e", envvar="POWERFLEX_ENDPOINT", help="PowerFlex gateway URL."
        ),
        "username": typer.Option(
            None, "--username", "-u", envvar="POWERFLEX_USERNAME", help="Gateway username."
        ),
        "password": typer.Option(
            None,
            "--password",
            "-p",
            envvar="POWERFLEX_PASSWORD",
            help="Gateway password.",
            hide_input=True,
        ),
        "version": typer.Option(
            None,
            "--version",
            envvar="POWERFLEX_VERSION",
            help="Pin the REST protocol version (e.g. 4.5) instead of discovering it.",
        ),
        "insecure": typer.Option(
            False,
            "--insecure",
            envvar="POWERFLEX_INSECURE",
            help="Disable TLS certificate verification.",
        ),
        "use_certs": typer.Option(
            False,
            "--use-certs",
            envvar="POWERFLEX_USECERTS",
            help="Verify TLS against the operating system trust store.",
        ),
        "cert_path": typer.Option(
            None,
            "--cert",
            envvar="POWERFLEX_CA_CERT",
            help="Path to a custom CA bundle for TLS verification.",
        ),
        "timeout": typer.Option(30.0, help="Request timeout (seconds).", show_default=True),
        "show_http": typer.Option(
            False,
            "--show-http",
            envvar="POWERFLEX_SHOWHTTP",
            help="Log HTTP exchanges at debug level.",
        ),
        "output_json": typer.Option(
            False, "--json", "-j", help="Return raw JSON instead of rendering a table."
        ),
    }


_SHARED_OPTIONS = _shared_options()


@app.command("version")
def show_version(
    endpoint: str = _SHARED_OPTIONS["endpoint"],
    username: str | None = _SHARED_OPTIONS["username"],
    password: str | None = _SHARED_OPTIONS["password"],
    version: str | None = _SHARED_OPTIONS["version"],
    insecure: bool = _SHARED_OPTIONS["insecure"],
    use_certs: bool = _SHARED_OPTIONS["use_certs"],
    cert_path: Path | None = _SHARED_OPTIONS["cert_path"],
    timeout: float = _SHARED_OPTIONS["timeout"],
    show_http: bool = _SHARED_OPTIONS["show_http"],
) -> None:
    """Log in and print the gateway's REST protocol version."""

    client, user, secret = _build_client(
        endpoint, username, password, version, insecure, use_certs, cert_path, timeout, show_http
    )
    with client:
        try:
            client.authenticate(user, secret)
            detected = client.get_version(refresh=True)
        except PowerFlexError as exc:
            _handle_error(exc)
            return
    typer.echo(detected)


@systems_app.command("list")
def systems_list(
    endpoint: str = _SHARED_OPTIONS["endpoint"],
    username: str | None = _SHARED_OPTIONS["username"],
    password: str | None = _SHARED_OPTIONS["password"],
    version: str | None = _SHARED_OPTIONS["version"],
    insecure: bool = _SHARED_OPTIONS["insecure"],
    use_certs: bool = _SHARED_OPTIONS["use_certs"],
    cert_path: Path | None = _SHARED_OPTIONS["cert_path"],
    timeout: float = _SHARED_OPTIONS["timeout"],
    show_http: bool = _SHARED_OPTIONS["show_http"],
    output_json: bool = _SHARED_OPTIONS["output_json"],
) -> None:
    """List systems managed by the gateway."""

    client, user, secret = _build_client(
        endpoint, username, password, version, insecure, use_certs, cert_path, timeout, show_http
    )
    with client:
        try:
            client.authenticate(user, secret)
            systems = client.systems.list()
        except PowerFlexError as exc:
            _handle_error(exc)
            return
    _present_output(systems, view_id="systems.list", json_output=output_json)


@volumes_app.command("list")
def volumes_list(
    endpoint: str = _SHARED_OPTIONS["endpoint"],
    username: str | None = _SHARED_OPTIONS["username"],
    password: str | None = _SHARED_OPTIONS["password"],
    version: str | None = _SHARED_OPTIONS["version"],
    insecure: bool = _SHARED_OPTIONS["insecure"],
    use_certs: bool = _SHARED_OPTIONS["use_certs"],
    cert_path: Path | None = _SHARED_OPTIONS["cert_path"],
    timeout: float = _SHARED_OPTIONS["timeout"],
    show_http: bool = _SHARED_OPTIONS["show_http"],
    output_json: bool = _SHARED_OPTIONS["output_json"],
) -> None:
    """List volumes."""

    client, user, secret = _build_client(
        endpoint, username, password, version, insecure, use_certs, cert_path, timeout, show_http
    )
    with client:
        try:
            client.authenticate(user, secret)
            volumes = client.volumes.list()
        except PowerFlexError as exc:
            _handle_error(exc)
            return
    _present_output(volumes, view_id="volumes.list", json_output=output_json)


@app.command("request")
def raw_request(
    method: str = typer.Argument(..., help="HTTP method, e.g. GET or POST."),
    path: str = typer.Argument(..., help="API path such as /api/types/System/instances."),
    data: str | None = typer.Option(None, "--data", "-d", help="JSON request body."),
    endpoint: str = _SHARED_OPTIONS["endpoint"],
    username: str | None = _SHARED_OPTIONS["username"],
    password: str | None = _SHARED_OPTIONS["password"],
    version: str | None = _SHARED_OPTIONS["version"],
    insecure: bool = _SHARED_OPTIONS["insecure"],
    use_certs: bool = _SHARED_OPTIONS["use_certs"],
    cert_path: Path | None = _SHARED_OPTIONS["cert_path"],
    timeout: float = _SHARED_OPTIONS["timeout"],
    show_http: bool = _SHARED_OPTIONS["show_http"],
) -> None:
    """Send an arbitrary authenticated request and print the JSON response."""

    payload: Any | None = None
    if data:
        try:
            payload = json.loads(data)
        except ValueError as exc:
            raise typer.BadParameter(f"--data is not valid JSON: {exc}") from exc

    client, user, secret = _build_client(
        endpoint, username, password, version, insecure, use_certs, cert_path, timeout, show_http
    )
    with client:
        try:
            client.authenticate(user, secret)
            result = client.execute(method.upper(), path, payload=payload)
        except PowerFlexError as exc:
            _handle_error(exc)
            return
    _echo_json(result)


def main() -> None:  # pragma: no cover - console entrypoint
    app()
