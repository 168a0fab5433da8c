"""
archive.py - Archive jobs and batches

A job turns one URL into one PDF on disk. A batch runs jobs one after the
other on a shared surface, with a polite delay between them, and keeps
going when a single job fails.
"""

import os
import time
from datetime import datetime
from pathlib import Path
from urllib.parse import urlparse

from .errors import ArchiverError, FileSystemError, InvalidUrl
from .models import JobResult
from .renderer import ArchiveRenderer
from .static_surface import StaticSurface
from .surface import launch
from .toc import TOCComposer


def validate_url(url: str) -> str:
    """Return the stripped url, or raise InvalidUrl."""
    if not isinstance(url, str) or not url.strip():
        raise InvalidUrl(str(url), "empty")
    candidate = url.strip()
    parsed = urlparse(candidate)
    if parsed.scheme not in ("http", "https"):
        raise InvalidUrl(candidate, "scheme must be http or https")
    if not parsed.hostname:
        raise InvalidUrl(candidate, "missing hostname")
    return candidate


def validate_urls(candidates) -> tuple:
    """Split candidates into (valid urls, InvalidUrl errors), keeping order."""
    valid = []
    invalid = []
    for candidate in candidates:
        try:
            valid.append(validate_url(candidate))
        except InvalidUrl as e:
            invalid.append(e)
    return valid, invalid


def read_url_file(path) -> list:
    """Read one URL per line; blank lines and # comments are skipped."""
    urls = []
    try:
        with open(path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#"):
                    urls.append(line)
    except OSError as e:
        raise FileSystemError(path, f"Failed to read URL file ({e.strerror})") from e
    return urls


def output_filename(url: str, now: datetime = None) -> str:
    now = now or datetime.now()
    hostname = (urlparse(url).hostname or "page").replace(".", "_")
    return f"{hostname}_{now.strftime('%Y-%m-%dT%H-%M-%S')}.pdf"


def _free_path(path: Path) -> Path:
    candidate = path
    counter = 2
    while candidate.exists():
        candidate = path.with_name(f"{path.stem}_{counter}{path.suffix}")
        counter += 1
    return candidate


def write_archive(data: bytes, path: Path) -> Path:
    """Write data to path atomically, creating the directory if needed."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FileSystemError(path.parent, f"Cannot create output directory ({e.strerror})") from e

    tmp_path = path.with_name(path.name + ".part")
    try:
        with open(tmp_path, "wb") as f:
            f.write(data)
        os.replace(tmp_path, path)
    except OSError as e:
        if tmp_path.exists():
            tmp_path.unlink()
        raise FileSystemError(path, f"Failed to write archive ({e.strerror})") from e
    return path


def build_archive(renderer: ArchiveRenderer, composer: TOCComposer, url: str,
                  title: str = None) -> tuple:
    """Render url and add the TOC. Returns (pdf bytes, rendered page)."""
    rendered = renderer.render(url)
    page_title = rendered.title or title or url
    if rendered.headings:
        return composer.compose(rendered.pdf_bytes, rendered.headings, page_title, url), rendered
    print("   ℹ️ No headings found, skipping table of contents")
    return rendered.pdf_bytes, rendered


def archive_url(renderer: ArchiveRenderer, composer: TOCComposer, url: str,
                output_dir, title: str = None, now: datetime = None) -> JobResult:
    """Archive a single URL; errors propagate to the caller."""
    data, _ = build_archive(renderer, composer, url, title=title)
    path = _free_path(Path(output_dir) / output_filename(url, now))
    path = write_archive(data, path)
    size_mb = len(data) / (1024 * 1024)
    print(f"✅ Archived: {path} ({size_mb:.2f} MB)")
    return JobResult(url=url, status="success", path=path, size_bytes=len(data))


def open_surface(settings):
    """Start the surface a run asks for. Raises SurfaceLaunchError."""
    if settings.static:
        print("🌐 Static mode: fetching pages without a browser")
        return StaticSurface()
    return launch(settings)


def archive_batch(urls, settings, surface=None, composer: TOCComposer = None,
                  sleep=time.sleep) -> list:
    """Archive urls in order and return one JobResult per url.

    A failing job is recorded and the batch moves on. Only failing to start
    a surface (SurfaceLaunchError) ends the run.
    """
    own_surface = surface is None
    if own_surface:
        surface = open_surface(settings)

    renderer = ArchiveRenderer(surface, settings)
    composer = composer or TOCComposer()
    results = []

    try:
        for i, url in enumerate(urls, 1):
            print(f"\n[{i}/{len(urls)}] Processing: {url}")
            try:
                results.append(archive_url(renderer, composer, url, settings.output_dir))
            except ArchiverError as e:
                print(f"❌ Failed to archive {url}: {e}")
                results.append(JobResult(url=url, status="failed", error=str(e)))
            except Exception as e:
                print(f"❌ Unexpected error archiving {url}: {e}")
                results.append(JobResult(url=url, status="failed", error=f"{type(e).__name__}: {e}"))

            if i < len(urls):
                print(f"⏳ Waiting {settings.delay_ms}ms before next request...")
                sleep(settings.delay_ms / 1000)
    finally:
        if own_surface:
            surface.close()

    return results


def print_summary(results, output_dir) -> None:
    succeeded = [r for r in results if r.succeeded]
    failed = [r for r in results if not r.succeeded]

    print("\n✨ Archive complete!\n")
    print("📊 Summary:")
    print(f"   ✅ Successfully archived: {len(succeeded)}")
    for result in succeeded:
        print(f"      - {result.path.name} ({result.size_bytes / (1024 * 1024):.2f} MB)")
    if failed:
        print(f"   ❌ Failed: {len(failed)}")
        for result in failed:
            print(f"      - {result.url}: {result.error}")
    print(f"\n📁 Archive location: {Path(output_dir).resolve()}\n")
