"""
blog_archiver - Archive web pages as paginated PDFs for offline reading.

Renders a URL in a headless browser, stabilizes the layout, extracts the
heading structure and prepends a clickable table of contents.
"""

__version__ = "1.0.0"
