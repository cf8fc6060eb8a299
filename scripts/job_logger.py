#!/usr/bin/env python3
"""
JobLogger CLI

Runs the native messaging host and talks to it from the command line, the same
way the browser extension does.

Commands:
    serve     - Run the native host on stdin/stdout
    ping      - Check that the host starts and answers
    save      - Save a scraped job (JSON file) as a job folder with snapshot
    open      - Open a job folder in the file browser via the host
    settings  - Show or change the caller settings (base folder, theme)
    manifest  - Write the browser native-messaging manifest
    errors    - Show recent entries from the host error log

Examples:\n

    job_logger.py ping                                      # Check the host

    job_logger.py settings set baseFolder ~/Jobs            # Configure base folder

    job_logger.py save job.json                             # Save a scraped job

    job_logger.py manifest ~/.config/google-chrome/NativeMessagingHosts -e <id>
"""

import shutil
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from joblogger.contexts.capture.client import NativeHostClient
from joblogger.contexts.capture.job_fields import JobFields, build_create_job_packet_request
from joblogger.contexts.capture.settings_store import SettingsStore
from joblogger.contexts.messaging.host import main as serve_host
from joblogger.contexts.messaging.manifest import HOST_NAME, write_host_manifest
from joblogger.exceptions import HostTransportError
from joblogger.utils.error_log import ERROR_LOG_FILE, read_error_log

load_dotenv()

app = typer.Typer(
    help="Capture job postings into local job folders through the JobLogger native host",
    add_completion=False,
    invoke_without_command=True,
)
settings_app = typer.Typer(help="Show or change caller settings", add_completion=False)
app.add_typer(settings_app, name="settings")


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _send(request_fn) -> dict:
    """Run a client call, turning transport and host failures into exit code 1."""
    try:
        reply = request_fn()
    except HostTransportError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if not reply.get("ok"):
        typer.secho(
            f"✗ {reply.get('errorCode')}: {reply.get('message')}\n", fg=typer.colors.RED, err=True
        )
        raise typer.Exit(code=1)
    return reply


@app.command("serve")
def serve_command():
    """
    Run the native host on this process's stdin/stdout.

    This is what the browser launches; it is not meant for interactive use.
    """
    serve_host()


@app.command("ping")
def ping_command(
    timeout: Annotated[
        float, typer.Option("--timeout", "-t", help="Seconds to wait for the host", min=0.1)
    ] = 10.0,
):
    """Check that the native host starts and responds."""
    reply = _send(NativeHostClient(timeout=timeout).ping)
    typer.secho(f"✓ {reply.get('message')} (protocol {reply.get('version')})", fg=typer.colors.GREEN)


@app.command("save")
def save_command(
    job_file: Annotated[
        Path,
        typer.Argument(help="JSON file with scraped job fields (camelCase keys)", exists=True),
    ],
    base_folder: Annotated[
        Optional[str],
        typer.Option("--base-folder", "-b", help="Base folder (default: from settings)"),
    ] = None,
    folder_name: Annotated[
        Optional[str],
        typer.Option("--folder-name", "-f", help="Folder name (default: date, company, title)"),
    ] = None,
):
    """
    Save a scraped job as a job folder with an HTML snapshot.

    Examples:\n

        $ job_logger.py save job.json                        # Base folder from settings

        $ job_logger.py save job.json -b ~/Jobs -f "Acme"    # Explicit folder
    """
    try:
        job = JobFields.from_file(job_file)
    except ValueError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    base = base_folder or SettingsStore().get("baseFolder")
    if not base:
        typer.secho(
            "Error: No base folder. Use --base-folder or 'settings set baseFolder PATH'.\n",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)

    request = build_create_job_packet_request(job, str(Path(base).expanduser()), folder_name)
    reply = _send(lambda: NativeHostClient().send(request))

    typer.secho("✓ Job saved", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  Folder: {reply['folderPath']}")
    typer.echo(f"  Snapshot: {reply['pdfPath']}")
    for warning in reply.get("warnings", []):
        typer.secho(f"  Warning: {warning}", fg=typer.colors.YELLOW)


@app.command("open")
def open_command(
    path: Annotated[Path, typer.Argument(help="Job folder to open")],
):
    """Open a job folder in the system file browser."""
    folder = path.expanduser().resolve()
    _send(lambda: NativeHostClient().open_folder(folder))
    typer.secho(f"✓ Opened {folder}", fg=typer.colors.GREEN)


@settings_app.command("show")
def settings_show_command():
    """Print the current settings."""
    store = SettingsStore()
    typer.echo(f"Settings file: {store.path}")
    for key, value in store.as_dict().items():
        typer.echo(f"  {key}: {value or '(not set)'}")


@settings_app.command("set")
def settings_set_command(
    key: Annotated[str, typer.Argument(help="Setting name (baseFolder or theme)")],
    value: Annotated[str, typer.Argument(help="New value")],
):
    """Change one setting."""
    try:
        SettingsStore().set(key, value)
    except (KeyError, ValueError) as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    typer.secho(f"✓ {key} saved", fg=typer.colors.GREEN)


@app.command("manifest")
def manifest_command(
    out_dir: Annotated[Path, typer.Argument(help="Directory browsers read host manifests from")],
    extension_ids: Annotated[
        List[str],
        typer.Option("--extension-id", "-e", help="Allowed extension id (repeatable)"),
    ],
    host_path: Annotated[
        Optional[Path],
        typer.Option("--host-path", help="Host executable (default: joblogger-host on PATH)"),
    ] = None,
):
    """Write the native-messaging manifest for the host."""
    if host_path is None:
        found = shutil.which("joblogger-host")
        if not found:
            typer.secho(
                "Error: joblogger-host not found on PATH; pass --host-path\n",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=1)
        host_path = Path(found)

    try:
        manifest_file = write_host_manifest(
            out_dir.expanduser(), host_path.resolve(), extension_ids
        )
    except ValueError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.secho(f"✓ Wrote {HOST_NAME} manifest", fg=typer.colors.GREEN)
    typer.echo(f"  {manifest_file}")


@app.command("errors")
def errors_command(
    n: Annotated[int, typer.Option("--num", "-n", help="Number of entries to show", min=1)] = 5,
):
    """Show the last entries of the host error log."""
    entries = read_error_log(n)
    if not entries:
        typer.echo(f"No errors logged ({ERROR_LOG_FILE})")
        raise typer.Exit()

    typer.echo(f"Last {len(entries)} error(s) from {ERROR_LOG_FILE}:\n")
    for entry in entries:
        typer.echo(entry)
        typer.echo("")


if __name__ == "__main__":
    app()
