#!/usr/bin/env python3
"""
server.py - Backend API for the Blog Archiver browser extension

The extension popup sends {"action": "generatePDF", "url", "title"} and
gets back {"success": true, "filename"} or {"success": false, "error"}.
When no browser can be started, pages are archived in static mode.

Usage:
    blog-archiver-server
    # Server runs on http://localhost:5000

Requirements:
    pip install flask flask-cors
"""

import os
import threading
import traceback
from datetime import datetime
from pathlib import Path

from flask import Flask, jsonify, request, send_from_directory
from flask_cors import CORS

from . import __version__
from .archive import archive_url, open_surface, validate_url
from .config import ArchiveSettings
from .errors import ArchiverError, InvalidUrl, SurfaceLaunchError
from .renderer import ArchiveRenderer
from .static_surface import StaticSurface
from .toc import TOCComposer

app = Flask(__name__)
CORS(app)  # Extension pages call from a chrome-extension:// origin

settings = ArchiveSettings.from_env()

# One job at a time, like the CLI batch loop
_job_lock = threading.Lock()


def _open_surface_with_fallback():
    try:
        return open_surface(settings), False
    except SurfaceLaunchError as e:
        print(f"⚠️ {e}; falling back to static mode")
        return StaticSurface(), True


@app.route('/health', methods=['GET'])
def health():
    """Health check endpoint."""
    return jsonify({
        'status': 'ok',
        'timestamp': datetime.now().isoformat(),
        'version': __version__
    })


@app.route('/generate', methods=['POST'])
def generate():
    """
    Archive one page.

    Request body:
    {
        "action": "generatePDF",
        "url": "https://...",
        "title": "Tab title"     # optional, used when the page has none
    }
    """
    data = request.get_json(silent=True) or {}

    if data.get('action', 'generatePDF') != 'generatePDF':
        return jsonify({'success': False, 'error': f"Unknown action: {data.get('action')}"}), 400

    try:
        url = validate_url(data.get('url'))
    except InvalidUrl as e:
        return jsonify({'success': False, 'error': str(e)}), 400

    with _job_lock:
        surface, fallback = _open_surface_with_fallback()
        try:
            renderer = ArchiveRenderer(surface, settings)
            result = archive_url(renderer, TOCComposer(), url, settings.output_dir,
                                 title=data.get('title'))
        except ArchiverError as e:
            print(f"❌ Failed to archive {url}: {e}")
            return jsonify({'success': False, 'error': str(e)}), 502
        except Exception as e:
            traceback.print_exc()
            return jsonify({'success': False, 'error': str(e)}), 500
        finally:
            surface.close()

    return jsonify({
        'success': True,
        'filename': result.path.name,
        'size': result.size_bytes,
        'static': fallback
    })


@app.route('/files', methods=['GET'])
def list_files():
    """List archived PDFs, newest first."""
    output_dir = Path(settings.output_dir)

    if not output_dir.exists():
        return jsonify({'files': []})

    paths = sorted(output_dir.glob('*.pdf'), key=lambda p: p.stat().st_mtime, reverse=True)
    files = []
    for f in paths[:50]:
        files.append({
            'name': f.name,
            'size': f.stat().st_size,
            'modified': datetime.fromtimestamp(f.stat().st_mtime).isoformat()
        })

    return jsonify({'files': files})


@app.route('/files/<filename>', methods=['GET'])
def get_file(filename):
    """Download one archived PDF."""
    output_dir = Path(settings.output_dir).resolve()
    filepath = output_dir / filename

    if filepath.suffix != '.pdf' or not filepath.is_file():
        return jsonify({'error': 'File not found'}), 404

    return send_from_directory(output_dir, filename, mimetype='application/pdf')


def main():
    port = int(os.getenv("ARCHIVER_PORT", "5000"))

    print("\n📚 Blog Archiver Backend Server")
    print("=" * 40)
    print(f"📡 Starting on http://localhost:{port}")
    print("📝 Endpoints:")
    print("   POST /generate         - Archive a page")
    print("   GET  /files            - List archived PDFs")
    print("   GET  /files/<filename> - Download a PDF")
    print("   GET  /health           - Health check")
    print("=" * 40 + "\n")

    app.run(host='127.0.0.1', port=port, debug=False)


if __name__ == '__main__':
    main()
