"""Google Drive, Docs and Sheets adapters."""

from gsuite_mcp.services.client import GoogleApiClient
from gsuite_mcp.services.docs import DocsService, DocumentWriteResult
from gsuite_mcp.services.drive import DriveService, FileContent
from gsuite_mcp.services.sheets import SheetsService

__all__ = [
    "GoogleApiClient",
    "DocsService",
    "DocumentWriteResult",
    "DriveService",
    "FileContent",
    "SheetsService",
]
