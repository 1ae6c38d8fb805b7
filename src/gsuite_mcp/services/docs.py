"""Google Docs operations."""

import logging
from dataclasses import dataclass, field
from typing import Any

from gsuite_mcp.schemas import (
    DocumentContent,
    DocumentLayout,
    FullDocument,
    Headers,
    PlainText,
    RawRequests,
    StyledSection,
)
from gsuite_mcp.services.client import DOCS_API_BASE, GoogleApiClient
from gsuite_mcp.services.doc_requests import (
    BODY_START_INDEX,
    delete_range_request,
    layout_body_requests,
    replace_segment_text_requests,
    section_requests,
    segment_end_index,
)

logger = logging.getLogger(__name__)


@dataclass
class DocumentWriteResult:
    """Outcome of writing content to a document.

    Attributes:
        document_id: ID of the document written.
        skipped_segments: Header/footer labels whose text was not written
            because the document has no such segment.
    """

    document_id: str
    skipped_segments: list[str] = field(default_factory=list)


def extract_body_text(document: dict[str, Any]) -> str:
    """Concatenate the text runs of a document's body paragraphs.

    Tables, section breaks and other non-paragraph elements are skipped.
    """
    text_parts = []
    for element in document.get("body", {}).get("content", []):
        if "paragraph" in element:
            for para_element in element["paragraph"].get("elements", []):
                if "textRun" in para_element:
                    text_parts.append(para_element["textRun"].get("content", ""))
    return "".join(text_parts)


def content_requests(content: PlainText | StyledSection | FullDocument) -> list[dict[str, Any]]:
    """Body insertion requests for replacement content, starting at index 1."""
    if isinstance(content, PlainText):
        requests, _ = section_requests(content.text, None, BODY_START_INDEX)
    elif isinstance(content, StyledSection):
        requests, _ = section_requests(content.text, content.style, BODY_START_INDEX)
    else:
        requests = layout_body_requests(content)
    return requests


class DocsService:
    """Docs v1 adapter."""

    def __init__(self, client: GoogleApiClient) -> None:
        self.client = client

    async def _get_document(self, document_id: str) -> dict[str, Any]:
        return await self.client.request("GET", f"{DOCS_API_BASE}/documents/{document_id}")

    async def _batch_update(
        self, document_id: str, requests: list[dict[str, Any]]
    ) -> dict[str, Any]:
        logger.debug(f"Applying {len(requests)} requests to document {document_id}")
        return await self.client.request(
            "POST",
            f"{DOCS_API_BASE}/documents/{document_id}:batchUpdate",
            json_data={"requests": requests},
        )

    async def create_document(
        self, title: str, content: DocumentLayout | None = None
    ) -> DocumentWriteResult:
        """Create a document, optionally laid out with content.

        Args:
            title: Document title.
            content: Cover page, headers, footer and body sections.

        Returns:
            The new document's ID and any header/footer segments skipped.
        """
        response = await self.client.request(
            "POST", f"{DOCS_API_BASE}/documents", json_data={"title": title}
        )
        result = DocumentWriteResult(document_id=response["documentId"])

        if content is not None:
            requests = layout_body_requests(content)
            if requests:
                await self._batch_update(result.document_id, requests)
            result.skipped_segments = await self._write_headers_and_footer(
                result.document_id, content, None
            )

        return result

    async def get_document_content(self, document_id: str) -> str:
        """Return the document body as plain text."""
        document = await self._get_document(document_id)
        return extract_body_text(document)

    async def update_document(
        self, document_id: str, content: DocumentContent
    ) -> DocumentWriteResult:
        """Replace a document's body with new content.

        ``RawRequests`` are applied verbatim, without clearing the body.
        Every other variant clears the body first, then inserts from
        index 1. A ``FullDocument`` also sets headers and footer.

        Args:
            document_id: Document ID.
            content: Replacement content.

        Returns:
            The document ID and any header/footer segments skipped.
        """
        result = DocumentWriteResult(document_id=document_id)
        if isinstance(content, RawRequests):
            await self._batch_update(document_id, content.requests)
            return result

        document = await self._get_document(document_id)
        end_index = segment_end_index(
            document.get("body", {}).get("content", []), BODY_START_INDEX + 1
        )

        requests: list[dict[str, Any]] = []
        # The body's final newline can't be deleted
        if end_index - 1 > BODY_START_INDEX:
            requests.append(delete_range_request(BODY_START_INDEX, end_index - 1))
        requests.extend(content_requests(content))

        if requests:
            await self._batch_update(document_id, requests)

        if isinstance(content, FullDocument):
            result.skipped_segments = await self._write_headers_and_footer(
                document_id, content, document
            )
        return result

    async def _write_headers_and_footer(
        self,
        document_id: str,
        layout: DocumentLayout,
        document: dict[str, Any] | None,
    ) -> list[str]:
        """Create any missing header/footer segments, then set their text.

        Segments are created in one batch; their IDs are then read back
        from the document and filled in a second batch.

        Returns:
            Labels of segments whose text was skipped because the document
            has no such segment.
        """
        headers = layout.headers or Headers()
        if not (headers.default or headers.first_page or layout.footer):
            return []

        style = (document or {}).get("documentStyle", {})
        setup: list[dict[str, Any]] = []
        if headers.default and not style.get("defaultHeaderId"):
            setup.append({"createHeader": {"type": "DEFAULT"}})
        if headers.first_page and not style.get("useFirstPageHeaderFooter"):
            setup.append(
                {
                    "updateDocumentStyle": {
                        "documentStyle": {"useFirstPageHeaderFooter": True},
                        "fields": "useFirstPageHeaderFooter",
                    }
                }
            )
        if layout.footer and not style.get("defaultFooterId"):
            setup.append({"createFooter": {"type": "DEFAULT"}})

        if setup or document is None:
            if setup:
                await self._batch_update(document_id, setup)
            document = await self._get_document(document_id)
            style = document.get("documentStyle", {})

        segments = {**document.get("headers", {}), **document.get("footers", {})}
        requests: list[dict[str, Any]] = []
        skipped: list[str] = []
        for label, segment_id, text in (
            ("header", style.get("defaultHeaderId"), headers.default),
            ("first-page header", style.get("firstPageHeaderId"), headers.first_page),
            ("footer", style.get("defaultFooterId"), layout.footer),
        ):
            if not text:
                continue
            if not segment_id:
                logger.warning(f"Document {document_id} has no {label} segment, skipping it")
                skipped.append(label)
                continue
            requests.extend(
                replace_segment_text_requests(segment_id, text, segments.get(segment_id))
            )

        if requests:
            await self._batch_update(document_id, requests)
        return skipped
