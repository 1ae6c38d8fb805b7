"""Builders for Google Docs ``batchUpdate`` requests.

Everything here is pure: descriptors in, request dicts out. Indexes are
counted in UTF-16 code units, which is how the Docs API addresses text.
"""

from typing import Any

from gsuite_mcp.schemas import (
    CoverPage,
    DocumentLayout,
    RGBColor,
    TextStyle,
)

# Body text starts after the implicit section break at index 0
BODY_START_INDEX = 1


def utf16_len(text: str) -> int:
    """Length of ``text`` in UTF-16 code units."""
    return len(text.encode("utf-16-le")) // 2


def _points(value: float) -> dict[str, Any]:
    return {"magnitude": value, "unit": "PT"}


def _color(color: RGBColor) -> dict[str, Any]:
    return {"color": {"rgbColor": color.model_dump(exclude_none=True)}}


def text_style_fields(style: TextStyle) -> tuple[dict[str, Any], list[str]]:
    """Translate the run-level part of a style.

    Returns:
        Tuple of (API TextStyle dict, field mask entries). Only attributes
        set on ``style`` appear in either.
    """
    text_style: dict[str, Any] = {}

    for attr, key in (
        ("bold", "bold"),
        ("italic", "italic"),
        ("underline", "underline"),
        ("strikethrough", "strikethrough"),
    ):
        value = getattr(style, attr)
        if value is not None:
            text_style[key] = value

    if style.font_size is not None:
        text_style["fontSize"] = _points(style.font_size)
    if style.foreground_color is not None:
        text_style["foregroundColor"] = _color(style.foreground_color)
    if style.background_color is not None:
        text_style["backgroundColor"] = _color(style.background_color)
    if style.font_family is not None:
        family: dict[str, Any] = {"fontFamily": style.font_family.family}
        if style.font_family.weight is not None:
            family["weight"] = style.font_family.weight
        text_style["weightedFontFamily"] = family

    return text_style, list(text_style)


def paragraph_style_fields(style: TextStyle) -> tuple[dict[str, Any], list[str]]:
    """Translate the paragraph-level part of a style.

    Returns:
        Tuple of (API ParagraphStyle dict, field mask entries).
    """
    paragraph_style: dict[str, Any] = {}

    if style.heading is not None:
        paragraph_style["namedStyleType"] = (
            "NORMAL_TEXT" if style.heading == "NORMAL" else style.heading
        )
    if style.alignment is not None:
        paragraph_style["alignment"] = style.alignment
    if style.line_spacing is not None:
        paragraph_style["lineSpacing"] = style.line_spacing

    for attr, key in (
        ("space_above", "spaceAbove"),
        ("space_below", "spaceBelow"),
        ("indent_start", "indentStart"),
        ("indent_end", "indentEnd"),
        ("indent_first_line", "indentFirstLine"),
    ):
        value = getattr(style, attr)
        if value is not None:
            paragraph_style[key] = _points(value)

    if style.direction is not None:
        paragraph_style["direction"] = style.direction

    for attr, key in (
        ("keep_lines_together", "keepLinesTogether"),
        ("keep_with_next", "keepWithNext"),
        ("page_break_before", "pageBreakBefore"),
    ):
        value = getattr(style, attr)
        if value is not None:
            paragraph_style[key] = value

    return paragraph_style, list(paragraph_style)


def style_requests(style: TextStyle | None, start: int, end: int) -> list[dict[str, Any]]:
    """Build text- and paragraph-style updates for ``[start, end)``.

    A request is emitted only when at least one of its attributes is set.
    """
    if style is None or end <= start:
        return []

    requests: list[dict[str, Any]] = []
    text_range = {"startIndex": start, "endIndex": end}

    text_style, text_fields = text_style_fields(style)
    if text_fields:
        requests.append(
            {
                "updateTextStyle": {
                    "range": text_range,
                    "textStyle": text_style,
                    "fields": ",".join(text_fields),
                }
            }
        )

    paragraph_style, paragraph_fields = paragraph_style_fields(style)
    if paragraph_fields:
        requests.append(
            {
                "updateParagraphStyle": {
                    "range": dict(text_range),
                    "paragraphStyle": paragraph_style,
                    "fields": ",".join(paragraph_fields),
                }
            }
        )

    return requests


def insert_text_request(text: str, index: int, segment_id: str | None = None) -> dict[str, Any]:
    location: dict[str, Any] = {"index": index}
    if segment_id:
        location["segmentId"] = segment_id
    return {"insertText": {"location": location, "text": text}}


def delete_range_request(
    start: int, end: int, segment_id: str | None = None
) -> dict[str, Any]:
    content_range: dict[str, Any] = {"startIndex": start, "endIndex": end}
    if segment_id:
        content_range["segmentId"] = segment_id
    return {"deleteContentRange": {"range": content_range}}


def section_requests(
    text: str,
    style: TextStyle | None,
    index: int,
    trailing_newline: bool = False,
) -> tuple[list[dict[str, Any]], int]:
    """Insert one (optionally styled) run of text at ``index``.

    Styles cover the text itself, not the trailing newline.

    Returns:
        Tuple of (requests, index just past the inserted text).
    """
    inserted = text + "\n" if trailing_newline else text
    if not inserted:
        return [], index

    requests = [insert_text_request(inserted, index)]
    requests.extend(style_requests(style, index, index + utf16_len(text)))
    return requests, index + utf16_len(inserted)


def _centered_paragraph(
    text: str, index: int, named_style: str | None
) -> tuple[list[dict[str, Any]], int]:
    paragraph_style: dict[str, Any] = {"alignment": "CENTER"}
    if named_style:
        paragraph_style = {"namedStyleType": named_style, **paragraph_style}

    end = index + utf16_len(text) + 1
    requests = [
        insert_text_request(text + "\n", index),
        {
            "updateParagraphStyle": {
                "range": {"startIndex": index, "endIndex": end},
                "paragraphStyle": paragraph_style,
                "fields": ",".join(paragraph_style),
            }
        },
    ]
    return requests, end


def cover_page_requests(cover: CoverPage, index: int) -> tuple[list[dict[str, Any]], int]:
    """Centered title, subtitle and date, followed by a page break.

    Returns:
        Tuple of (requests, index just past the page break).
    """
    requests, index = _centered_paragraph(cover.title, index, "TITLE")

    if cover.subtitle:
        subtitle_requests, index = _centered_paragraph(cover.subtitle, index, "SUBTITLE")
        requests.extend(subtitle_requests)

    if cover.date:
        date_requests, index = _centered_paragraph(cover.date, index, None)
        requests.extend(date_requests)

    # The page break is followed by its own newline
    requests.append({"insertPageBreak": {"location": {"index": index}}})
    return requests, index + 2


def layout_body_requests(
    layout: DocumentLayout, index: int = BODY_START_INDEX
) -> list[dict[str, Any]]:
    """Requests for the cover page and body sections of a layout."""
    requests: list[dict[str, Any]] = []

    if layout.cover_page:
        cover_requests, index = cover_page_requests(layout.cover_page, index)
        requests.extend(cover_requests)

    for section in layout.body:
        sec_requests, index = section_requests(
            section.text, section.style, index, trailing_newline=True
        )
        requests.extend(sec_requests)

    return requests


def segment_end_index(content: list[dict[str, Any]], default: int) -> int:
    """End index of a structural-element list (body, header, or footer)."""
    if not content:
        return default
    return int(content[-1].get("endIndex", default))


def replace_segment_text_requests(
    segment_id: str, text: str, segment: dict[str, Any] | None
) -> list[dict[str, Any]]:
    """Replace the text of a header or footer segment.

    Header and footer indexes start at 0; their final newline can't be
    deleted.
    """
    requests: list[dict[str, Any]] = []
    end = segment_end_index((segment or {}).get("content", []), 1)
    if end - 1 > 0:
        requests.append(delete_range_request(0, end - 1, segment_id))
    if text:
        requests.append(insert_text_request(text, 0, segment_id))
    return requests
