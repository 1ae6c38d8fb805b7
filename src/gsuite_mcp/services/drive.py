"""Google Drive operations."""

import json
import logging
import uuid
from dataclasses import dataclass
from typing import Any

from gsuite_mcp.services.client import DRIVE_API_BASE, DRIVE_UPLOAD_BASE, GoogleApiClient

logger = logging.getLogger(__name__)

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
WORKSPACE_MIME_PREFIX = "application/vnd.google-apps"

# Workspace-native types can't be downloaded, only exported
EXPORT_MIME_TYPES = {
    "application/vnd.google-apps.document": "text/markdown",
    "application/vnd.google-apps.spreadsheet": "text/csv",
    "application/vnd.google-apps.presentation": "text/plain",
    "application/vnd.google-apps.drawing": "image/png",
}
DEFAULT_EXPORT_MIME_TYPE = "text/plain"

FILE_FIELDS = "id, name, mimeType, description, parents"


@dataclass
class FileContent:
    """Content of a Drive file, as exported or downloaded.

    Attributes:
        mime_type: MIME type of ``content`` (the export type for Workspace files).
        content: Decoded text, or raw bytes for binary files.
    """

    mime_type: str
    content: str | bytes

    @property
    def is_text(self) -> bool:
        return isinstance(self.content, str)


def escape_query_literal(value: str) -> str:
    """Escape a value for use inside a single-quoted Drive query string."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def _decode_text(content: bytes) -> str:
    # Non-UTF-8 bytes become U+FFFD instead of failing the read
    return content.decode("utf-8", errors="replace")


def _is_text_mime_type(mime_type: str) -> bool:
    return mime_type.startswith("text/") or mime_type == "application/json"


class DriveService:
    """Drive v3 adapter.

    Example:
        ```python
        drive = DriveService(client)
        files = await drive.search_files("quarterly report")
        ```
    """

    def __init__(self, client: GoogleApiClient) -> None:
        self.client = client

    async def search_files(self, query: str, page_size: int = 10) -> list[dict[str, Any]]:
        """Full-text search over Drive.

        Args:
            query: Search terms; quotes and backslashes are escaped.
            page_size: Maximum number of files to return.

        Returns:
            Matching files with id, name, mimeType, modifiedTime and size.
        """
        params = {
            "q": f"fullText contains '{escape_query_literal(query)}'",
            "pageSize": page_size,
            "fields": "files(id, name, mimeType, modifiedTime, size)",
        }
        response = await self.client.request("GET", f"{DRIVE_API_BASE}/files", params=params)
        files: list[dict[str, Any]] = response.get("files", [])
        return files

    async def create_folder(
        self,
        name: str,
        parents: list[str] | None = None,
        description: str | None = None,
    ) -> dict[str, Any]:
        """Create a folder.

        Returns:
            Created folder metadata.
        """
        metadata = self._file_metadata(name, FOLDER_MIME_TYPE, parents, description)
        return await self.client.request(
            "POST",
            f"{DRIVE_API_BASE}/files",
            params={"fields": FILE_FIELDS},
            json_data=metadata,
        )

    async def create_file(
        self,
        name: str,
        mime_type: str,
        content: str,
        parents: list[str] | None = None,
        description: str | None = None,
    ) -> dict[str, Any]:
        """Create a file with metadata and content in one multipart upload.

        Returns:
            Created file metadata.
        """
        metadata = self._file_metadata(name, mime_type, parents, description)

        boundary = f"gsuite_mcp_{uuid.uuid4().hex}"
        body_parts = [
            f"--{boundary}",
            "Content-Type: application/json; charset=UTF-8",
            "",
            json.dumps(metadata),
            f"--{boundary}",
            f"Content-Type: {mime_type}",
            "",
            content,
            f"--{boundary}--",
        ]
        body = "\r\n".join(body_parts)

        response = await self.client.raw_request(
            "POST",
            f"{DRIVE_UPLOAD_BASE}/files",
            params={"uploadType": "multipart", "fields": FILE_FIELDS},
            content=body.encode("utf-8"),
            headers={"Content-Type": f"multipart/related; boundary={boundary}"},
            timeout=60.0,
        )
        result: dict[str, Any] = response.json()
        return result

    async def update_file(self, file_id: str, content: str, mime_type: str) -> dict[str, Any]:
        """Replace a file's content.

        Returns:
            File id, name, mimeType and modifiedTime after the update.
        """
        response = await self.client.raw_request(
            "PATCH",
            f"{DRIVE_UPLOAD_BASE}/files/{file_id}",
            params={"uploadType": "media", "fields": "id, name, mimeType, modifiedTime"},
            content=content.encode("utf-8"),
            headers={"Content-Type": mime_type},
            timeout=60.0,
        )
        result: dict[str, Any] = response.json()
        return result

    async def get_file_content(self, file_id: str) -> FileContent:
        """Read a file's content, exporting Workspace documents.

        Documents export as Markdown, spreadsheets as CSV, presentations as
        plain text and drawings as PNG. Regular files are downloaded; text
        and JSON are decoded as UTF-8, anything else is returned as bytes.

        Args:
            file_id: Drive file ID.

        Returns:
            FileContent with the effective MIME type.
        """
        metadata = await self.client.request(
            "GET", f"{DRIVE_API_BASE}/files/{file_id}", params={"fields": "mimeType"}
        )
        mime_type = metadata.get("mimeType") or "application/octet-stream"

        if mime_type.startswith(WORKSPACE_MIME_PREFIX):
            export_type = EXPORT_MIME_TYPES.get(mime_type, DEFAULT_EXPORT_MIME_TYPE)
            logger.debug(f"Exporting {file_id} ({mime_type}) as {export_type}")
            response = await self.client.raw_request(
                "GET",
                f"{DRIVE_API_BASE}/files/{file_id}/export",
                params={"mimeType": export_type},
            )
            if export_type.startswith("image/"):
                return FileContent(mime_type=export_type, content=response.content)
            return FileContent(mime_type=export_type, content=_decode_text(response.content))

        response = await self.client.raw_request(
            "GET",
            f"{DRIVE_API_BASE}/files/{file_id}",
            params={"alt": "media"},
            timeout=60.0,
        )
        if _is_text_mime_type(mime_type):
            return FileContent(mime_type=mime_type, content=_decode_text(response.content))
        return FileContent(mime_type=mime_type, content=response.content)

    async def get_file(self, file_id: str, fields: str | None = None) -> dict[str, Any]:
        """Get file metadata."""
        return await self.client.request(
            "GET",
            f"{DRIVE_API_BASE}/files/{file_id}",
            params={"fields": fields or "id, name, mimeType, modifiedTime, size"},
        )

    async def list_files(
        self,
        query: str | None = None,
        page_size: int | None = None,
        fields: str | None = None,
        order_by: str | None = None,
        page_token: str | None = None,
    ) -> dict[str, Any]:
        """List files, optionally filtered by a Drive query expression.

        Args:
            query: Drive ``q`` expression, passed through unchanged.
            page_size: Page size (default 100).
            fields: Field projection. Defaults to ids, names and MIME types
                plus the next page token.
            order_by: Sort order, e.g. ``modifiedTime desc``.
            page_token: Token from a previous page.

        Returns:
            The Drive file list response.
        """
        params = {
            "q": query,
            "pageSize": page_size or 100,
            "fields": fields or "nextPageToken, files(id, name, mimeType)",
            "orderBy": order_by,
            "pageToken": page_token,
        }
        return await self.client.request("GET", f"{DRIVE_API_BASE}/files", params=params)

    async def update_file_metadata(
        self,
        file_id: str,
        name: str | None = None,
        description: str | None = None,
        mime_type: str | None = None,
        add_parents: list[str] | None = None,
        remove_parents: list[str] | None = None,
    ) -> dict[str, Any]:
        """Rename, describe or move a file.

        Returns:
            Updated file metadata.
        """
        body = {
            key: value
            for key, value in (
                ("name", name),
                ("description", description),
                ("mimeType", mime_type),
            )
            if value is not None
        }
        params = {
            "fields": FILE_FIELDS,
            "addParents": ",".join(add_parents) if add_parents else None,
            "removeParents": ",".join(remove_parents) if remove_parents else None,
        }
        return await self.client.request(
            "PATCH", f"{DRIVE_API_BASE}/files/{file_id}", params=params, json_data=body
        )

    @staticmethod
    def _file_metadata(
        name: str,
        mime_type: str,
        parents: list[str] | None,
        description: str | None,
    ) -> dict[str, Any]:
        metadata: dict[str, Any] = {"name": name, "mimeType": mime_type}
        if parents:
            metadata["parents"] = parents
        if description:
            metadata["description"] = description
        return metadata
