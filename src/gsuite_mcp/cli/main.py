"""Command-line interface for gsuite-mcp."""

import asyncio
import sys

import click

from gsuite_mcp.__version__ import __version__

OAUTH_SETUP_STEPS = [
    "Go to Google Cloud Console",
    "Create a project or select an existing one",
    "Enable the required APIs (Drive, Docs, Sheets)",
    "Create OAuth 2.0 credentials (Desktop app)",
    "Download the OAuth keys file",
]


@click.group(invoke_without_command=True)
@click.version_option(version=__version__)
@click.pass_context
def main(ctx: click.Context) -> None:
    """Google Suite MCP Server - Drive, Docs and Sheets tools over MCP.

    Run without a command to start the stdio server.
    """
    if ctx.invoked_subcommand is None:
        ctx.invoke(serve)


@main.command()
def auth() -> None:
    """Authorize access to Google Drive, Docs and Sheets.

    Opens the browser for the OAuth consent flow and saves the resulting
    credentials to GOOGLE_CREDENTIALS_PATH (default
    ~/.google/server-creds.json).

    Requires the OAuth client keys file at GOOGLE_OAUTH_PATH (default
    ~/.google/oauth.keys.json).
    """
    from gsuite_mcp.auth import AuthenticationError, AuthErrorCode, OAuthManager

    manager = OAuthManager()

    if not manager.storage.has_client_config():
        click.echo(f"❌ OAuth keys file not found at {manager.oauth_path}")
        click.echo("")
        click.echo("To set up authentication:")
        for step, text in enumerate(OAUTH_SETUP_STEPS, start=1):
            click.echo(f"  {step}. {text}")
        click.echo(f"  {len(OAUTH_SETUP_STEPS) + 1}. Save it to {manager.oauth_path}")
        click.echo("")
        click.echo("Then run this command again.")
        sys.exit(1)

    click.echo("Starting OAuth authentication flow...")
    click.echo("Browser will open for Google consent...")
    click.echo("")

    try:
        asyncio.run(manager.perform_full_authentication())
    except AuthenticationError as e:
        click.echo(f"❌ Authentication failed: {e}")
        if e.code == AuthErrorCode.AUTH_FAILED and e.__cause__ is not None:
            click.echo(f"   Cause: {e.__cause__}")
        sys.exit(1)

    click.echo("✓ Authentication successful!")
    click.echo(f"Credentials saved to: {manager.credentials_path}")
    click.echo("You can now run the server.")


@main.command()
def serve() -> None:
    """Start the stdio MCP server.

    Saved credentials are required; run 'gsuite-mcp auth' first.
    """
    from gsuite_mcp.auth import AUTH_HINT, AuthenticationError, OAuthManager
    from gsuite_mcp.server import main as server_main

    manager = OAuthManager()

    try:
        credentials = manager.load_saved_credentials()
    except AuthenticationError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    if credentials is None:
        click.echo(f"❌ Credentials not found at {manager.credentials_path}", err=True)
        click.echo(AUTH_HINT, err=True)
        sys.exit(1)

    if not credentials.refresh_token and not credentials.valid:
        click.echo("❌ Saved access token has expired and can't be refreshed.", err=True)
        click.echo(AUTH_HINT, err=True)
        sys.exit(1)

    click.echo("Credentials loaded. Starting Google Suite MCP server...", err=True)
    try:
        server_main(manager)
    except KeyboardInterrupt:
        click.echo("\nServer stopped.", err=True)


@main.command()
def status() -> None:
    """Show credential paths and status."""
    from gsuite_mcp.auth import CredentialStatus, OAuthManager

    manager = OAuthManager()
    cred_status, stored = manager.get_status()

    click.echo(f"OAuth keys:  {manager.oauth_path}")
    click.echo(f"  {'found' if manager.storage.has_client_config() else 'missing'}")
    click.echo(f"Credentials: {manager.credentials_path}")
    click.echo(f"  Status: {cred_status.value}")

    if stored is not None:
        if stored.expires_at:
            click.echo(f"  Access token expires: {stored.expires_at.isoformat()}")
        click.echo(f"  Refresh token: {'yes' if stored.refresh_token else 'no'}")
        if stored.scopes:
            click.echo("  Scopes:")
            for scope in stored.scopes:
                click.echo(f"    - {scope}")

    if cred_status in (CredentialStatus.MISSING, CredentialStatus.INVALID):
        click.echo("")
        click.echo("Run 'gsuite-mcp auth' to authenticate.")


if __name__ == "__main__":
    main()
