"""MCP server implementation for Google Drive, Docs and Sheets.

Provides 16 tools:

Drive Tools (7):
- Full-text search
- Create folders and files
- Update file content and metadata
- Get file metadata and list files

Docs Tools (3):
- Create documents with cover page, headers, footer and styled sections
- Read document text
- Replace document content (plain, styled, full layout, or raw requests)

Sheets Tools (6):
- Create spreadsheets
- Read and write values
- Format and merge cells
- Insert, delete and resize rows/columns

Resources: Drive files as ``gdrive:///<file id>``.

Transport: Stdio
Authentication: OAuth 2.0 with automatic token refresh
"""

from gsuite_mcp.auth import OAuthManager
from gsuite_mcp.server.gsuite_server import GSuiteServer, ToolNotFoundError, main


def create_server(manager: OAuthManager | None = None) -> GSuiteServer:
    """Create and configure a Google Suite MCP server.

    Args:
        manager: OAuthManager to use. A default one (reading the paths from
            the environment) is created if not provided.

    Returns:
        GSuiteServer: Configured server instance ready to run.

    Example:
        >>> server = create_server()
        >>> asyncio.run(server.run())
    """
    return GSuiteServer(manager or OAuthManager())


__all__ = ["create_server", "GSuiteServer", "ToolNotFoundError", "main"]
