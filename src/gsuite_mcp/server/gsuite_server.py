"""Google Suite MCP server.

Exposes Drive, Docs and Sheets operations as MCP tools, and Drive files as
``gdrive:///<file id>`` resources. Every API call goes through one shared
``GoogleApiClient``, which asks the ``OAuthManager`` for a fresh token as
needed.
"""

import asyncio
import json
import logging
import os
import sys
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

import httpx
from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, Resource, TextContent, Tool
from pydantic import AnyUrl, BaseModel, ValidationError

from gsuite_mcp.auth import OAuthManager
from gsuite_mcp.schemas import (
    CreateDocInput,
    CreateFileInput,
    CreateFolderInput,
    CreateSpreadsheetInput,
    DimensionOperationInput,
    FormatCellsInput,
    GetDocContentInput,
    GetFileInput,
    GetValuesInput,
    ListFilesInput,
    MergeCellsInput,
    SearchInput,
    UpdateDocContentInput,
    UpdateFileInput,
    UpdateFileMetadataInput,
    UpdateValuesInput,
)
from gsuite_mcp.server.tools import TOOL_MODELS, list_tools
from gsuite_mcp.services import DocsService, DriveService, GoogleApiClient, SheetsService

logger = logging.getLogger(__name__)

SERVER_NAME = "gsuite-mcp"
RESOURCE_URI_PREFIX = "gdrive:///"
RESOURCE_LIST_SIZE = 10
LOG_LEVEL_ENV = "GSUITE_MCP_LOG_LEVEL"


class ToolNotFoundError(Exception):
    """Raised when a tool call names a tool that isn't in the catalog."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Tool not found: {name}")
        self.name = name


class ToolCallFailed(Exception):
    """Carries an already formatted error message back to the MCP SDK.

    The SDK turns exceptions raised by the ``call_tool`` handler into
    ``isError`` results whose text is ``str(exc)``.
    """


def configure_logging() -> None:
    """Configure root logging to stderr; stdout carries the stdio transport.

    The level comes from ``GSUITE_MCP_LOG_LEVEL`` (default INFO).
    """
    level = logging.getLevelName(os.environ.get(LOG_LEVEL_ENV, "INFO").upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _error_cause(error: Exception) -> Any:
    """Best available detail about what caused ``error``, or None."""
    if isinstance(error, httpx.HTTPStatusError):
        try:
            return error.response.json()
        except ValueError:
            return error.response.text or None
    if error.__cause__ is not None:
        return str(error.__cause__)
    return None


def format_error(error: Exception) -> str:
    """Render an exception as the single text block of an error result.

    Example:
        ```
        An error occurred: Client error '404 Not Found' for url '...'
        Cause: {"error": {"code": 404, "message": "File not found: abc"}}
        ```
    """
    message = f"An error occurred: {error}"
    cause = _error_cause(error)
    if cause is not None:
        message += f"\nCause: {json.dumps(cause)}"
    return message


def _error_result(text: str) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=True)


def _skipped_note(skipped_segments: list[str]) -> str:
    if not skipped_segments:
        return ""
    return f"\nNot written (document has no such segment): {', '.join(skipped_segments)}"


def file_id_from_uri(uri: str) -> str:
    """Extract the Drive file ID from a ``gdrive:///<id>`` resource URI.

    Raises:
        ValueError: If the URI isn't a gdrive resource URI.
    """
    if not uri.startswith(RESOURCE_URI_PREFIX) or len(uri) == len(RESOURCE_URI_PREFIX):
        raise ValueError(f"Unsupported resource URI: {uri}")
    return uri[len(RESOURCE_URI_PREFIX) :]


class GSuiteServer:
    """MCP server for Google Drive, Docs and Sheets.

    Attributes:
        server: MCP Server instance.
        manager: OAuthManager supplying credentials.
        client: Shared Google API client.
        drive: Drive adapter.
        docs: Docs adapter.
        sheets: Sheets adapter.
    """

    def __init__(
        self,
        manager: OAuthManager,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the server.

        Args:
            manager: OAuthManager, constructed by the entry point.
            http_client: Optional preconfigured httpx client (tests inject a
                mock transport here).
        """
        self.server = Server(SERVER_NAME)
        self.manager = manager
        self.client = GoogleApiClient(manager, http_client=http_client)
        self.drive = DriveService(self.client)
        self.docs = DocsService(self.client)
        self.sheets = SheetsService(self.client)
        self._setup_handlers()

    async def close(self) -> None:
        """Close the shared HTTP client and release resources."""
        await self.client.close()

    def _setup_handlers(self) -> None:
        """Register MCP tool and resource handlers."""

        @self.server.list_tools()
        async def handle_list_tools() -> list[Tool]:
            return list_tools()

        # Arguments are validated by the pydantic models, which also coerce
        @self.server.call_tool(validate_input=False)
        async def handle_call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
            result = await self.call_tool(name, arguments)
            if result.isError:
                raise ToolCallFailed(result.content[0].text)
            return [block for block in result.content if isinstance(block, TextContent)]

        @self.server.list_resources()
        async def handle_list_resources() -> list[Resource]:
            return await self.list_resources()

        @self.server.read_resource()
        async def handle_read_resource(uri: AnyUrl) -> Iterable[ReadResourceContents]:
            return await self.read_resource(str(uri))

    # =========================================================================
    # Tools
    # =========================================================================

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> CallToolResult:
        """Validate arguments, dispatch, and wrap the outcome.

        Never raises: unknown tools, invalid arguments and API failures all
        come back as ``isError`` results with a single text block.
        """
        logger.info(f"Tool call: {name}")
        try:
            text = await self._dispatch_tool(name, arguments or {})
        except ToolNotFoundError as e:
            logger.warning(str(e))
            return _error_result(format_error(e))
        except ValidationError as e:
            logger.warning(f"Invalid arguments for tool {name}: {e}")
            return _error_result(f"Invalid arguments for tool {name}:\n{e}")
        except Exception as e:
            logger.exception(f"Error calling tool {name}")
            return _error_result(format_error(e))

        return CallToolResult(content=[TextContent(type="text", text=text)], isError=False)

    async def _dispatch_tool(self, name: str, arguments: dict[str, Any]) -> str:
        """Dispatch tool call to appropriate handler.

        Args:
            name: Tool name.
            arguments: Raw tool arguments.

        Returns:
            Result text.

        Raises:
            ToolNotFoundError: If tool name is not recognized.
            ValidationError: If the arguments don't fit the tool's model.
        """
        handlers: dict[str, Callable[[Any], Awaitable[str]]] = {
            # Drive
            "search": self._search,
            "drive_create_folder": self._drive_create_folder,
            "drive_create_file": self._drive_create_file,
            "drive_update_file": self._drive_update_file,
            "drive_get_file": self._drive_get_file,
            "drive_list_files": self._drive_list_files,
            "drive_update_metadata": self._drive_update_metadata,
            # Docs
            "docs_create": self._docs_create,
            "docs_get_content": self._docs_get_content,
            "docs_update_content": self._docs_update_content,
            # Sheets
            "sheets_create": self._sheets_create,
            "sheets_update_values": self._sheets_update_values,
            "sheets_format_cells": self._sheets_format_cells,
            "sheets_dimension_operation": self._sheets_dimension_operation,
            "sheets_merge_cells": self._sheets_merge_cells,
            "sheets_get_values": self._sheets_get_values,
        }

        handler = handlers.get(name)
        if handler is None:
            raise ToolNotFoundError(name)

        params: BaseModel = TOOL_MODELS[name].model_validate(arguments)
        return await handler(params)

    # -------------------------------------------------------------------------
    # Drive
    # -------------------------------------------------------------------------

    async def _search(self, params: SearchInput) -> str:
        files = await self.drive.search_files(params.query, page_size=params.page_size)
        file_list = "\n".join(f"{f.get('name')} ({f.get('mimeType')})" for f in files)
        return f"Found {len(files)} files:\n{file_list}"

    async def _drive_create_folder(self, params: CreateFolderInput) -> str:
        folder = await self.drive.create_folder(
            params.name, parents=params.parents, description=params.description
        )
        return f"Created folder with ID: {folder.get('id')}"

    async def _drive_create_file(self, params: CreateFileInput) -> str:
        created = await self.drive.create_file(
            params.name,
            params.mime_type,
            params.content,
            parents=params.parents,
            description=params.description,
        )
        return f"Created file with ID: {created.get('id')}"

    async def _drive_update_file(self, params: UpdateFileInput) -> str:
        await self.drive.update_file(params.file_id, params.content, params.mime_type)
        return "File updated successfully"

    async def _drive_get_file(self, params: GetFileInput) -> str:
        metadata = await self.drive.get_file(params.file_id, fields=params.fields)
        return json.dumps(metadata, indent=2)

    async def _drive_list_files(self, params: ListFilesInput) -> str:
        listing = await self.drive.list_files(
            query=params.query,
            page_size=params.page_size,
            fields=params.fields,
            order_by=params.order_by,
            page_token=params.page_token,
        )
        return json.dumps(listing, indent=2)

    async def _drive_update_metadata(self, params: UpdateFileMetadataInput) -> str:
        await self.drive.update_file_metadata(
            params.file_id,
            name=params.name,
            description=params.description,
            mime_type=params.mime_type,
            add_parents=params.add_parents,
            remove_parents=params.remove_parents,
        )
        return "File metadata updated successfully"

    # -------------------------------------------------------------------------
    # Docs
    # -------------------------------------------------------------------------

    async def _docs_create(self, params: CreateDocInput) -> str:
        result = await self.docs.create_document(params.title, content=params.content)
        return f"Created document with ID: {result.document_id}" + _skipped_note(
            result.skipped_segments
        )

    async def _docs_get_content(self, params: GetDocContentInput) -> str:
        return await self.docs.get_document_content(params.document_id)

    async def _docs_update_content(self, params: UpdateDocContentInput) -> str:
        result = await self.docs.update_document(params.document_id, params.content)
        return "Document updated successfully" + _skipped_note(result.skipped_segments)

    # -------------------------------------------------------------------------
    # Sheets
    # -------------------------------------------------------------------------

    async def _sheets_create(self, params: CreateSpreadsheetInput) -> str:
        spreadsheet_id = await self.sheets.create_spreadsheet(params.title, sheets=params.sheets)
        return f"Created spreadsheet with ID: {spreadsheet_id}"

    async def _sheets_update_values(self, params: UpdateValuesInput) -> str:
        await self.sheets.update_values(
            params.spreadsheet_id,
            params.range,
            params.values,
            major_dimension=params.major_dimension,
        )
        return "Values updated successfully"

    async def _sheets_format_cells(self, params: FormatCellsInput) -> str:
        await self.sheets.format_cells(params.spreadsheet_id, params.range, params.format)
        return "Cell formatting applied successfully"

    async def _sheets_dimension_operation(self, params: DimensionOperationInput) -> str:
        await self.sheets.dimension_operation(
            params.spreadsheet_id,
            params.sheet_id,
            params.dimension,
            params.start_index,
            params.operation,
            end_index=params.end_index,
            size=params.size,
        )
        return f"{params.operation} operation completed successfully"

    async def _sheets_merge_cells(self, params: MergeCellsInput) -> str:
        await self.sheets.merge_cells(
            params.spreadsheet_id, params.range, merge_type=params.merge_type
        )
        return "Cells merged successfully"

    async def _sheets_get_values(self, params: GetValuesInput) -> str:
        values = await self.sheets.get_values(
            params.spreadsheet_id, params.range, major_dimension=params.major_dimension
        )
        return json.dumps(values, indent=2)

    # =========================================================================
    # Resources
    # =========================================================================

    async def list_resources(self) -> list[Resource]:
        """List recent Drive files as ``gdrive:///<id>`` resources."""
        listing = await self.drive.list_files(page_size=RESOURCE_LIST_SIZE)
        return [
            Resource(
                uri=AnyUrl(f"{RESOURCE_URI_PREFIX}{item['id']}"),
                name=item.get("name") or item["id"],
                mimeType=item.get("mimeType"),
            )
            for item in listing.get("files", [])
        ]

    async def read_resource(self, uri: str) -> list[ReadResourceContents]:
        """Read a Drive file; binary content is sent as a base64 blob."""
        file_content = await self.drive.get_file_content(file_id_from_uri(uri))
        return [
            ReadResourceContents(content=file_content.content, mime_type=file_content.mime_type)
        ]

    async def run(self) -> None:
        """Run the MCP server using stdio transport."""
        try:
            async with stdio_server() as (read_stream, write_stream):
                await self.server.run(
                    read_stream,
                    write_stream,
                    self.server.create_initialization_options(),
                )
        finally:
            await self.close()


def main(manager: OAuthManager | None = None) -> None:
    """Entry point for the Google Suite MCP server."""
    configure_logging()
    server = GSuiteServer(manager or OAuthManager())
    asyncio.run(server.run())


if __name__ == "__main__":
    main()
