"""Configuration settings for package_builder.

Uses pydantic-settings for config parsing from environment variables
and defaults. Configuration precedence: CLI flags > env vars > defaults.
The CLI assembles one Settings instance per invocation and passes it down;
nothing below the CLI reads the environment.
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    Settings are loaded from environment variables with the PACKAGE_BUILDER_
    prefix. CLI flags override these at runtime by being passed as keyword
    arguments.
    """

    model_config = SettingsConfigDict(
        env_prefix="PACKAGE_BUILDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = Field(default=False, description="Enable debug logging")

    # Server connectivity
    hostname: str = Field(default="", description="Hostname of the gRPC server")
    enroll_secret: str = Field(
        default="", description="Server enrollment secret embedded in packages"
    )
    cert_pins: str = Field(
        default="",
        description="Comma separated, hex encoded SHA256 hashes of pinned SPKI",
    )
    root_pem: str = Field(
        default="", description="Path to PEM file with root certificates"
    )
    insecure: bool = Field(default=False, description="Pass --insecure to launcher")
    insecure_grpc: bool = Field(
        default=False, description="Pass --insecure_grpc to launcher"
    )

    # Versions (channel names or filesystem paths)
    package_version: str = Field(
        default="", description="Resulting package version (blank: autodetect)"
    )
    osquery_version: str = Field(default="stable", description="osquery channel")
    launcher_version: str = Field(default="stable", description="launcher channel")
    extension_version: str = Field(
        default="stable", description="osquery extension channel"
    )

    # Launcher behaviour
    autoupdate: bool = Field(default=False, description="Enable autoupdate")
    update_channel: str = Field(default="", description="Autoupdate channel")
    control: bool = Field(default=False, description="Enable control service")
    control_hostname: str = Field(default="", description="Control server host")
    disable_control_tls: bool = Field(
        default=False, description="Disable TLS for the control service"
    )
    with_initial_runner: bool = Field(
        default=False, description="Run differential queries ahead of schedule"
    )
    omit_secret: bool = Field(
        default=False, description="Omit the enroll secret from packages"
    )
    identifier: str = Field(
        default="launcher", description="Installation directory shard name"
    )
    mac_package_signing_key: str = Field(
        default="", description="Name of the key used to sign macOS packages"
    )

    # Workspace
    output_dir: Path | None = Field(
        default=None, description="Package output directory (random if unset)"
    )
    cache_dir: Path | None = Field(
        default=None, description="Download cache directory (random if unset)"
    )
    tmp_dir: Path | None = Field(
        default=None,
        description="Parent for generated directories (system default if unset)",
    )

    targets: str = Field(default="", description="Target platforms to build")

    # Packaging engine
    engine_command: str = Field(
        default="launcher-packager",
        description="Executable of the external packaging engine",
    )
    engine_timeout: int | None = Field(
        default=None,
        ge=1,
        description="Timeout in seconds for a single engine call (none if unset)",
    )

    @field_validator("output_dir", "cache_dir", "tmp_dir", mode="before")
    @classmethod
    def blank_path_is_unset(cls, v: object) -> object:
        """Treat an empty path as not given."""
        if v == "":
            return None
        return v


def get_settings(**overrides: object) -> Settings:
    """Build settings, letting explicit overrides win over the environment.

    Args:
        **overrides: Values given on the command line. ``None`` values are
            treated as not given.

    Returns:
        Settings instance.
    """
    given = {k: v for k, v in overrides.items() if v is not None}
    return Settings(**given)


__all__ = ["Settings", "get_settings"]
