"""
toc.py - Table of contents synthesis and PDF merge

Lays out one or more TOC pages with ReportLab, estimates a page number per
heading, then copies every content page behind the TOC with pypdf and adds
clickable entries, bookmarks and archive metadata.

Page numbers are estimates: headings are assumed to be spread evenly over
the content pages by their position in the document. The renderer only
reports a page count, so there is nothing more precise to go on.
"""

import io
from dataclasses import dataclass
from datetime import datetime, timezone

from pypdf import PdfReader, PdfWriter
from pypdf.generic import (
    ArrayObject, DictionaryObject, FloatObject, NameObject, NumberObject
)
from reportlab.lib.pagesizes import A4
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from . import config
from .errors import MalformedSourceDocument

PAGE_SIZE = A4
MARGIN = 50
BOTTOM_LIMIT = MARGIN + 50
INDENT_UNIT = 20
LINE_GAP = 8

FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"
UNICODE_FONT_NAME = "ArchiveUnicode"
# Ships with ReportLab, covers CJK
CID_FONT = "STSong-Light"

TITLE_SIZE = 24
DOC_TITLE_SIZE = 14
META_SIZE = 10

HEADING_LIMIT = 60
HEADER_LIMIT = 70

AUTHOR = "Blog Archiver"
CREATOR = "blog-archiver"
ARCHIVE_KEYWORDS = ["blog", "archive", "offline"]
TITLE_KEYWORD_COUNT = 5


@dataclass(frozen=True)
class TocEntry:
    heading: object
    toc_page: int
    x: float
    y: float
    text: str
    font: str
    size: int
    page_number: int


_unicode_font = None


def unicode_font() -> str:
    """Register the font used for non-Latin text once and return its name."""
    global _unicode_font
    if _unicode_font is None:
        if config.TOC_FONT_PATH:
            pdfmetrics.registerFont(TTFont(UNICODE_FONT_NAME, config.TOC_FONT_PATH))
            _unicode_font = UNICODE_FONT_NAME
        else:
            pdfmetrics.registerFont(UnicodeCIDFont(CID_FONT))
            _unicode_font = CID_FONT
    return _unicode_font


def font_for(text: str, font: str) -> str:
    """Keep font when it can encode text, else switch to the Unicode font."""
    try:
        (text or "").encode("cp1252")
        return font
    except UnicodeEncodeError:
        return unicode_font()


def truncate(text: str, limit: int) -> str:
    """Cut text to limit characters and mark the cut with '...'."""
    text = text or ""
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def estimate_page(index: int, heading_count: int, page_count: int, base_offset: int) -> int:
    """Interpolate a heading's page from its document position.

    The result always lies in [base_offset, base_offset + page_count - 1].
    """
    if heading_count < 1 or page_count < 1:
        raise ValueError("heading_count and page_count must be positive")
    index = max(index, 0)
    return min(base_offset + (index * page_count) // heading_count,
               base_offset + page_count - 1)


def header_height() -> int:
    """Vertical space taken by the header block on the first TOC page."""
    return 40 + 20 + 14 + 30


def layout_toc(headings, page_count: int, page_size=PAGE_SIZE) -> tuple:
    """Place every heading on a TOC page.

    Returns (entries, toc_page_count). A new TOC page is opened whenever the
    cursor has dropped below the bottom limit. Page numbers are estimated
    once the TOC length is known, so every entry points past the TOC.
    """
    width, height = page_size
    heading_count = len(headings)
    placed = []
    toc_pages = 1
    y = height - MARGIN - header_height()

    for heading in headings:
        if y < BOTTOM_LIMIT:
            toc_pages += 1
            y = height - MARGIN
        size = 12 if heading.level == 1 else 10
        placed.append((heading, toc_pages - 1, y, size))
        y -= size + LINE_GAP

    content_start = toc_pages + 1
    entries = []
    for heading, toc_page, entry_y, size in placed:
        text = truncate(heading.text, HEADING_LIMIT)
        entries.append(TocEntry(
            heading=heading,
            toc_page=toc_page,
            x=MARGIN + (heading.level - 1) * INDENT_UNIT,
            y=entry_y,
            text=text,
            font=font_for(text, BOLD_FONT if heading.level == 1 else FONT),
            size=size,
            page_number=estimate_page(heading.source_order, heading_count, page_count, content_start),
        ))

    return entries, toc_pages


def pdf_date(moment: datetime) -> str:
    """Format a datetime as a PDF date string."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    offset = moment.utcoffset()
    minutes = int(offset.total_seconds() // 60)
    sign = "+" if minutes >= 0 else "-"
    minutes = abs(minutes)
    return moment.strftime("D:%Y%m%d%H%M%S") + f"{sign}{minutes // 60:02d}'{minutes % 60:02d}'"


def archive_keywords(title: str) -> str:
    keywords = list(ARCHIVE_KEYWORDS)
    keywords.extend((title or "").split()[:TITLE_KEYWORD_COUNT])
    return ", ".join(keywords)


def read_pdf(data: bytes) -> PdfReader:
    """Parse data as a PDF or raise MalformedSourceDocument."""
    if not data:
        raise MalformedSourceDocument("Content PDF is empty")
    try:
        reader = PdfReader(io.BytesIO(data))
        page_count = len(reader.pages)
    except Exception as e:
        raise MalformedSourceDocument(f"Content is not a readable PDF: {e}") from e
    if page_count == 0:
        raise MalformedSourceDocument("Content PDF has no pages")
    return reader


class TOCComposer:
    def __init__(self, page_size=PAGE_SIZE, clock=None):
        self.page_size = page_size
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def compose(self, content_pdf: bytes, headings, title: str, url: str) -> bytes:
        """Prepend TOC pages to content_pdf and return the merged PDF.

        With no headings the content comes back unchanged.
        """
        reader = read_pdf(content_pdf)
        if not headings:
            return content_pdf

        now = self.clock()
        page_count = len(reader.pages)
        entries, toc_page_count = layout_toc(headings, page_count, self.page_size)
        print(f"📚 Adding table of contents: {len(entries)} entries on {toc_page_count} page(s)")

        toc_reader = PdfReader(io.BytesIO(self.draw_toc(entries, toc_page_count, title, url, now)))

        writer = PdfWriter()
        for page in toc_reader.pages:
            writer.add_page(page)
        for page in reader.pages:
            writer.add_page(page)

        self._add_links(writer, entries)
        self._add_outline(writer, entries)

        writer.add_metadata({
            "/Title": f"{title or url} - Offline Archive",
            "/Author": AUTHOR,
            "/Creator": CREATOR,
            "/Subject": f"Archived from: {url}",
            "/Keywords": archive_keywords(title),
            "/CreationDate": pdf_date(now),
            "/ModDate": pdf_date(now),
        })

        output = io.BytesIO()
        writer.write(output)
        return output.getvalue()

    def draw_toc(self, entries, toc_page_count: int, title: str, url: str, archived_at: datetime) -> bytes:
        """Render the laid-out entries to a standalone PDF of toc_page_count pages."""
        width, height = self.page_size
        buffer = io.BytesIO()
        c = canvas.Canvas(buffer, pagesize=self.page_size)

        # Header, first page only
        y = height - MARGIN
        c.setFillColorRGB(0, 0, 0)
        c.setFont(BOLD_FONT, TITLE_SIZE)
        c.drawString(MARGIN, y, "Table of Contents")
        y -= 40
        c.setFillColorRGB(0.3, 0.3, 0.3)
        doc_title = truncate(title, HEADER_LIMIT)
        c.setFont(font_for(doc_title, FONT), DOC_TITLE_SIZE)
        c.drawString(MARGIN, y, doc_title)
        y -= 20
        c.setFillColorRGB(0.4, 0.4, 0.7)
        source = truncate(url, HEADER_LIMIT)
        c.setFont(font_for(source, FONT), META_SIZE)
        c.drawString(MARGIN, y, source)
        y -= 14
        c.setFillColorRGB(0.5, 0.5, 0.5)
        c.setFont(FONT, META_SIZE)
        c.drawString(MARGIN, y, f"Archived: {archived_at:%B} {archived_at.day}, {archived_at.year}")

        current = 0
        for entry in entries:
            while current < entry.toc_page:
                c.showPage()
                current += 1
            c.setFillColorRGB(0, 0, 0)
            c.setFont(entry.font, entry.size)
            c.drawString(entry.x, entry.y, entry.text)
            c.setFillColorRGB(0.5, 0.5, 0.5)
            c.setFont(FONT, entry.size)
            c.drawRightString(width - MARGIN, entry.y, str(entry.page_number))

        while current < toc_page_count - 1:
            c.showPage()
            current += 1

        c.save()
        return buffer.getvalue()

    def _add_links(self, writer: PdfWriter, entries):
        width = self.page_size[0]
        for entry in entries:
            target = writer.pages[entry.page_number - 1]
            text_width = stringWidth(entry.text, entry.font, entry.size)
            rect = [entry.x, entry.y - 2, max(entry.x + text_width, width - MARGIN), entry.y + entry.size]
            link = DictionaryObject({
                NameObject("/Type"): NameObject("/Annot"),
                NameObject("/Subtype"): NameObject("/Link"),
                NameObject("/Rect"): ArrayObject([FloatObject(v) for v in rect]),
                NameObject("/Border"): ArrayObject([NumberObject(0), NumberObject(0), NumberObject(0)]),
                NameObject("/A"): DictionaryObject({
                    NameObject("/S"): NameObject("/GoTo"),
                    NameObject("/D"): ArrayObject([target.indirect_reference, NameObject("/Fit")]),
                }),
            })
            writer.add_annotation(page_number=entry.toc_page, annotation=link)

    def _add_outline(self, writer: PdfWriter, entries):
        # (level, outline item) of the open ancestors
        stack = []
        for entry in entries:
            level = entry.heading.level
            while stack and stack[-1][0] >= level:
                stack.pop()
            parent = stack[-1][1] if stack else None
            item = writer.add_outline_item(
                entry.heading.text or entry.heading.anchor_id,
                entry.page_number - 1,
                parent=parent,
            )
            stack.append((level, item))
