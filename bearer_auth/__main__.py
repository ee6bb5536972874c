"""
bearer_auth entry point

Allows running the service via `python -m bearer_auth`.
Configures logging to stderr and dispatches to the typer commands.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import typer

from .core.config import AuthConfig, ConfigError
from .core.constants import (
    DEFAULT_KEYS_DIR,
    PRIVATE_KEY_FILE,
    PUBLIC_KEY_FILE,
    SERVICE_NAME,
    SERVICE_VERSION,
)
from .core.factory import build_components
from .persistence.credential_store import CredentialStoreError
from .transport.http_transport import HTTPTransport
from .security.authentication.key_provider import write_key_pair


app = typer.Typer(help="Password registration and ES256 bearer tokens")


def setup_logging(level: int = logging.INFO) -> None:
    """Configure logging to stderr"""
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


@app.command("genkeys")
def genkeys(
    out: str = typer.Option(DEFAULT_KEYS_DIR, "--out", "-o", help="Directory for the key pair"),
    force: bool = typer.Option(False, "--force", help="Overwrite existing key files"),
):
    """
    Generate an EC P-256 key pair for token signing.
    """
    setup_logging()
    try:
        private_path, public_path = write_key_pair(out, overwrite=force)
    except FileExistsError as e:
        typer.echo(f"{e}. Use --force to overwrite.")
        raise typer.Exit(code=1)

    typer.echo(f"Private key: {private_path}")
    typer.echo(f"Public key:  {public_path}")


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Bind port"),
    data_dir: Optional[str] = typer.Option(None, "--data-dir", help="Credential store directory"),
    keys_dir: Optional[str] = typer.Option(None, "--keys-dir", help="Directory holding the key pair"),
    debug: bool = typer.Option(False, "--debug", help="Verbose logging"),
):
    """
    Run the HTTP service. Options override BEARER_AUTH_* environment variables.
    """
    setup_logging(logging.DEBUG if debug else logging.INFO)
    logger = logging.getLogger("main")

    try:
        config = AuthConfig.from_env()
        if host is not None:
            config.http.host = host
        if port is not None:
            config.http.port = port
        if data_dir is not None:
            config.data_dir = data_dir
        if keys_dir is not None:
            config.private_key_path = str(Path(keys_dir) / PRIVATE_KEY_FILE)
            config.public_key_path = str(Path(keys_dir) / PUBLIC_KEY_FILE)
        config.validate()
    except ConfigError as e:
        typer.echo(f"Invalid configuration: {e}")
        raise typer.Exit(code=2)

    try:
        components = build_components(config)
    except CredentialStoreError as e:
        logger.critical(f"Cannot open credential store: {e}")
        raise typer.Exit(code=1)
    transport = HTTPTransport(components.service, components.guard, config.http)

    logger.info(f"Starting {SERVICE_NAME} v{SERVICE_VERSION} on {config.http.host}:{config.http.port}...")
    try:
        asyncio.run(transport.serve_forever())
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")


if __name__ == "__main__":
    app()
