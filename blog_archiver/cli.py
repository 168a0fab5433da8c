#!/usr/bin/env python3
"""
cli.py - Blog Archiver command line

Archives web pages as paginated PDFs with a table of contents.

Usage:
    blog-archiver https://example.com/post
    blog-archiver https://a.example/post https://b.example/post --delay 3000
    blog-archiver --file urls.txt --output ./archive

    # Fixed rendering width instead of auto-detection
    blog-archiver https://example.com/post --width 1024

    # No browser available: fetch and typeset the HTML directly
    blog-archiver https://example.com/post --static

Requirements:
    pip install -e . && playwright install chromium
"""

import argparse
import sys

from . import __version__
from .archive import archive_batch, print_summary, read_url_file, validate_urls
from .config import DEFAULT_DELAY_MS, MAX_WIDTH, MIN_WIDTH, ArchiveSettings
from .errors import FileSystemError, SurfaceLaunchError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blog-archiver",
        description="Archive blogs for offline reading - converts pages to PDFs with a table of contents.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  blog-archiver https://example.com/post
  blog-archiver --file urls.txt --output ./archive --delay 3000
  blog-archiver https://example.com/post --width 1024 --full-page
        """,
    )
    parser.add_argument("urls", nargs="*", help="URL(s) of pages to archive")
    parser.add_argument("-f", "--file", help="Read URLs from a text file (one per line)")
    parser.add_argument("-o", "--output", help="Output directory for PDFs (default: ./archive)")
    parser.add_argument("--delay", type=int,
                        help=f"Delay between URLs in ms (default: {DEFAULT_DELAY_MS})")
    parser.add_argument("--width", type=int,
                        help="Viewport width in px; disables width auto-detection")
    parser.add_argument("--full-page", action="store_true",
                        help="Capture the full page height without fixed page size")
    parser.add_argument("--static", action="store_true",
                        help="Fetch HTML without a browser (no JavaScript)")
    parser.add_argument("--headed", action="store_true",
                        help="Show the browser window")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    candidates = list(args.urls)
    if args.file:
        try:
            candidates.extend(read_url_file(args.file))
        except FileSystemError as e:
            print(f"❌ {e}")
            return 1

    if not candidates:
        print("ℹ️  No URLs provided.")
        parser.print_help()
        return 1

    valid, invalid = validate_urls(candidates)
    for error in invalid:
        print(f"❌ {error}")
    if not valid:
        print("❌ No valid URLs to process")
        return 1

    if args.width is not None and not MIN_WIDTH <= args.width <= MAX_WIDTH:
        print(f"⚠️ Width {args.width}px is outside the usual {MIN_WIDTH}-{MAX_WIDTH}px range")

    settings = ArchiveSettings.from_env(
        output_dir=args.output,
        delay_ms=args.delay,
        width_override=args.width,
        full_page=args.full_page or None,
        static=args.static or None,
        headless=False if args.headed else None,
    )

    plural = "s" if len(valid) > 1 else ""
    print(f"\n📚 Archiving {len(valid)} page{plural} for offline reading...")

    try:
        results = archive_batch(valid, settings)
    except SurfaceLaunchError as e:
        print(f"❌ {e}")
        return 1

    print_summary(results, settings.output_dir)
    return 0 if any(r.succeeded for r in results) else 1


if __name__ == "__main__":
    sys.exit(main())
