"""Google Suite MCP Server.

Expose Google Drive, Docs, and Sheets to MCP clients as tools and resources.
"""

from gsuite_mcp.__version__ import __version__

__all__ = ["__version__"]
