"""
stylesheets.py - Style layers injected before rendering

Both layers are plain strings built once per job. The print layer goes in
first; the overflow layer is only ever added on top of it.
"""

# Clutter that has no place in an offline copy
HIDDEN_SELECTORS = (
    ".no-print",
    "nav:not(.article-nav)",
    ".navigation:not(.post-navigation)",
    ".sidebar:not(.article-sidebar)",
    ".advertisement",
    ".cookie-banner",
    ".popup",
    ".modal",
    ".comments-section",
    ".social-share",
    ".newsletter-signup",
    '[class*="cookie"]',
    '[class*="popup"]:not(.content-popup)',
    '[class*="social"]',
    '[id*="cookie"]',
    '[id*="popup"]',
    'iframe[src*="youtube"]',
    'iframe[src*="vimeo"]',
    ".video-container",
)

# Element types checked for horizontal overflow
WATCHED_SELECTORS = ("img", "table", "pre", "code", "figure", "picture", "video", "svg")


def build_print_stylesheet(hidden_selectors=HIDDEN_SELECTORS) -> str:
    """Return the print-oriented style layer as one immutable string."""
    hidden = ",\n    ".join(hidden_selectors)
    return f"""
@media print, screen {{
  * {{
    -webkit-print-color-adjust: exact !important;
    print-color-adjust: exact !important;
  }}

  a {{
    color: #0066cc !important;
    text-decoration: underline !important;
  }}

  pre, code {{
    white-space: pre-wrap !important;
    word-wrap: break-word !important;
    overflow-wrap: break-word !important;
  }}

  pre {{
    max-width: 100% !important;
  }}

  pre code {{
    background: inherit !important;
    border: inherit !important;
    padding: inherit !important;
  }}

  h1, h2, h3, h4, h5, h6 {{
    page-break-after: avoid;
    page-break-inside: avoid;
  }}

  p {{
    orphans: 3;
    widows: 3;
  }}

  img, figure, picture {{
    max-width: 100% !important;
    height: auto !important;
    page-break-inside: avoid !important;
  }}

  table {{
    max-width: 100% !important;
    width: auto !important;
  }}

  article, .post-content, .entry-content, main {{
    width: auto !important;
    max-width: 100% !important;
    margin: 0 auto !important;
  }}

  {hidden} {{
    display: none !important;
  }}
}}
"""


PRINT_STYLESHEET = build_print_stylesheet()

OVERFLOW_STYLESHEET = """
@media print, screen {
  html, body {
    overflow-x: hidden !important;
    max-width: 100% !important;
  }

  * {
    max-width: 100% !important;
    box-sizing: border-box !important;
  }

  img, table, pre, code, figure, picture, video, svg, iframe {
    max-width: 100% !important;
    overflow-x: hidden !important;
  }

  table {
    table-layout: fixed !important;
    word-break: break-word !important;
  }
}
"""
