"""Thin CLI wrapper for package_builder.

This module provides the command-line interface using Typer.
All business logic is delegated to core modules.
"""

import platform
import sys
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from typer.core import TyperGroup

from package_builder import __version__
from package_builder.builds.engine import CommandEngine, PackageEngine
from package_builder.config import Settings, get_settings
from package_builder.errors import PackageBuilderError

PROG_NAME = "package-builder"

err_console = Console(stderr=True)


def usage() -> None:
    """Print top-level usage to stderr."""
    err_console.print(
        "USAGE\n"
        f"  {PROG_NAME} <mode> --help\n"
        "\n"
        "MODES\n"
        "  make         Generate a single launcher package for each platform\n"
        "  version      Print full version information\n"
        "\n"
        "VERSION\n"
        f"  {__version__}\n",
        highlight=False,
        markup=False,
    )


class ModeGroup(TyperGroup):
    """Command group that treats an unknown mode as a usage error (exit 1)."""

    def resolve_command(self, ctx, args):
        if args:
            # Mode names match case-insensitively; options stay case-sensitive
            name = args[0].lower()
            if self.get_command(ctx, name) is None:
                usage()
                ctx.exit(1)
            args = [name, *args[1:]]
        return super().resolve_command(ctx, args)


app = typer.Typer(
    name=PROG_NAME,
    cls=ModeGroup,
    help="Launcher Package Builder - build launcher installer packages",
    invoke_without_command=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"{PROG_NAME} version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Launcher Package Builder - build launcher installer packages."""
    if ctx.invoked_subcommand is None:
        usage()
        raise typer.Exit(code=1)


@app.command(
    context_settings={"ignore_unknown_options": True, "allow_extra_args": True}
)
def version() -> None:
    """Print full version information."""
    typer.echo(f"{PROG_NAME} - version {__version__}")
    typer.echo(f"  python version: {platform.python_version()}")
    typer.echo(f"  implementation: {platform.python_implementation()}")
    typer.echo(f"  platform:       {sys.platform}/{platform.machine()}")


def get_engine(settings: Settings) -> PackageEngine:
    """Return the packaging engine for a run."""
    return CommandEngine(settings.engine_command, timeout=settings.engine_timeout)


@app.command()
def make(
    hostname: Annotated[
        str | None,
        typer.Option("--hostname", help="The hostname of the gRPC server"),
    ] = None,
    package_version: Annotated[
        str | None,
        typer.Option(
            "--package_version",
            "--package-version",
            help="The resultant package version (blank: auto detect)",
        ),
    ] = None,
    osquery_version: Annotated[
        str | None,
        typer.Option(
            "--osquery_version",
            "--osquery-version",
            help="TUF channel or filesystem path for osquery [default: stable]",
        ),
    ] = None,
    launcher_version: Annotated[
        str | None,
        typer.Option(
            "--launcher_version",
            "--launcher-version",
            help="TUF channel or filesystem path for launcher [default: stable]",
        ),
    ] = None,
    extension_version: Annotated[
        str | None,
        typer.Option(
            "--extension_version",
            "--extension-version",
            help="TUF channel or filesystem path for the osquery extension "
            "[default: stable]",
        ),
    ] = None,
    enroll_secret: Annotated[
        str | None,
        typer.Option(
            "--enroll_secret",
            "--enroll-secret",
            help="The server enrollment secret",
        ),
    ] = None,
    mac_package_signing_key: Annotated[
        str | None,
        typer.Option(
            "--mac_package_signing_key",
            "--mac-package-signing-key",
            help="Name of the key used to sign packages (platform specific)",
        ),
    ] = None,
    insecure: Annotated[
        bool,
        typer.Option("--insecure", help="Invoke launcher with --insecure"),
    ] = False,
    insecure_grpc: Annotated[
        bool,
        typer.Option(
            "--insecure_grpc",
            "--insecure-grpc",
            help="Invoke launcher with --insecure_grpc",
        ),
    ] = False,
    autoupdate: Annotated[
        bool,
        typer.Option("--autoupdate", help="Invoke launcher with --autoupdate"),
    ] = False,
    update_channel: Annotated[
        str | None,
        typer.Option(
            "--update_channel",
            "--update-channel",
            help="Value for launcher's --update_channel",
        ),
    ] = None,
    control: Annotated[
        bool,
        typer.Option("--control", help="Invoke launcher with --control"),
    ] = False,
    control_hostname: Annotated[
        str | None,
        typer.Option(
            "--control_hostname",
            "--control-hostname",
            help="Value for launcher's --control_hostname",
        ),
    ] = None,
    disable_control_tls: Annotated[
        bool,
        typer.Option(
            "--disable_control_tls",
            "--disable-control-tls",
            help="Invoke launcher with --disable_control_tls",
        ),
    ] = False,
    identifier: Annotated[
        str | None,
        typer.Option(
            "--identifier",
            help="Directory the installation shards into [default: launcher]",
        ),
    ] = None,
    omit_secret: Annotated[
        bool,
        typer.Option(
            "--omit_secret",
            "--omit-secret",
            help="Omit the enroll secret in the resultant package",
        ),
    ] = False,
    cert_pins: Annotated[
        str | None,
        typer.Option(
            "--cert_pins",
            "--cert-pins",
            help="Comma separated, hex encoded SHA256 hashes of pinned SPKI",
        ),
    ] = None,
    root_pem: Annotated[
        str | None,
        typer.Option(
            "--root_pem",
            "--root-pem",
            help="Path to PEM file including root certificates",
        ),
    ] = None,
    output_dir: Annotated[
        str | None,
        typer.Option(
            "--output_dir",
            "--output-dir",
            help="Directory to output package files to [default: random]",
        ),
    ] = None,
    cache_dir: Annotated[
        str | None,
        typer.Option(
            "--cache_dir",
            "--cache-dir",
            help="Directory to cache downloads in [default: random]",
        ),
    ] = None,
    with_initial_runner: Annotated[
        bool,
        typer.Option(
            "--with_initial_runner",
            "--with-initial-runner",
            help="Run differential queries ahead of the scheduled interval",
        ),
    ] = False,
    targets: Annotated[
        str | None,
        typer.Option(
            "--targets",
            help="Target platforms to build (comma separated: darwin, deb, rpm)",
        ),
    ] = None,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable debug logging"),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Generate a single launcher package for each platform."""
    from package_builder.builds.artifacts import render_summary
    from package_builder.builds.service import make_packages
    from package_builder.log import configure_logging

    try:
        # Flags only switch booleans on; unset values fall back to the environment
        settings = get_settings(
            debug=debug or None,
            hostname=hostname,
            package_version=package_version,
            osquery_version=osquery_version,
            launcher_version=launcher_version,
            extension_version=extension_version,
            enroll_secret=enroll_secret,
            mac_package_signing_key=mac_package_signing_key,
            insecure=insecure or None,
            insecure_grpc=insecure_grpc or None,
            autoupdate=autoupdate or None,
            update_channel=update_channel,
            control=control or None,
            control_hostname=control_hostname,
            disable_control_tls=disable_control_tls or None,
            identifier=identifier,
            omit_secret=omit_secret or None,
            cert_pins=cert_pins,
            root_pem=root_pem,
            output_dir=output_dir,
            cache_dir=cache_dir,
            with_initial_runner=with_initial_runner or None,
            targets=targets,
        )
    except ValidationError as e:
        typer.echo(f"invalid configuration: {e}", err=True)
        raise typer.Exit(code=1) from None

    configure_logging(debug=settings.debug, quiet=json_output)

    try:
        report = make_packages(settings, get_engine(settings))
    except PackageBuilderError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1) from None

    if json_output:
        typer.echo(render_summary(report.output_dir, report.artifacts))
    else:
        typer.echo(f"Built your packages in {report.output_dir}")


__all__ = ["app", "main"]
