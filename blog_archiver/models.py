"""Records passed between the pipeline stages."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class HeadingRecord:
    level: int
    text: str
    anchor_id: str
    source_order: int

    @classmethod
    def from_probe(cls, raw: dict, index: int) -> "HeadingRecord":
        """Build a record from one entry returned by the heading probe."""
        level = min(max(int(raw.get("level", 1)), 1), 6)
        text = " ".join(str(raw.get("text", "")).split())
        anchor_id = raw.get("id") or f"heading-{index}"
        return cls(level=level, text=text, anchor_id=anchor_id, source_order=index)


@dataclass(frozen=True)
class ViewportDecision:
    content_width: int
    document_width: int
    scroll_width: int
    recommended_width: int


@dataclass(frozen=True)
class RenderedPage:
    """Raw output of ArchiveRenderer, ready for the TOC composer."""

    pdf_bytes: bytes
    headings: tuple
    title: str
    url: str
    viewport: ViewportDecision = None


@dataclass
class JobResult:
    url: str
    status: str
    path: Path = None
    error: str = None
    size_bytes: int = 0

    @property
    def succeeded(self) -> bool:
        return self.status == "success"
