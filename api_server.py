#!/usr/bin/env python3
"""
PixelPorter API Server
Converts an uploaded image (or an image URL) into the Roblox pixel-grid JSON.
"""

import os
import logging
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from flask import Flask, Response, request, jsonify
from flask_cors import CORS
from werkzeug.utils import secure_filename

# --- Centralized Logging Configuration ---
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
    datefmt='%H:%M:%S'
)

# Import services and models
from pixelporter.models.errors import (
    BackendUnavailable,
    DecodeFailed,
    FetchFailed,
    NoInputProvided,
)
from pixelporter.pipeline.convert import MAX_DIM, convert_image
from pixelporter.services.image_service import ImageService

app = Flask(__name__)
CORS(app)  # Enable CORS for frontend communication

# Configuration
ALLOWED_EXTENSIONS = set(os.getenv("ALLOWED_EXTENSIONS", "png,jpg,jpeg,gif,bmp,webp").split(","))
MAX_UPLOAD_SIZE_MB = int(os.getenv("MAX_UPLOAD_SIZE_MB", "25"))
OUTPUT_FILENAME = os.getenv("OUTPUT_FILENAME", "roblox-image-data.json")

app.config['MAX_CONTENT_LENGTH'] = MAX_UPLOAD_SIZE_MB * 1024 * 1024

# Initialize services
image_service = ImageService()

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = {
    NoInputProvided: 400,
    DecodeFailed: 422,
    FetchFailed: 502,
    BackendUnavailable: 503,
}


def allowed_file(filename: str) -> bool:
    """Check if file extension is allowed."""
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def error_response(kind: str, message: str, status: int):
    return jsonify({'error': kind, 'message': message}), status


def read_max_dim():
    """max_dim from query string, form or JSON body; falls back to MAX_DIM."""
    raw = request.args.get('max_dim') or request.form.get('max_dim')
    if raw is None and request.is_json:
        raw = (request.get_json(silent=True) or {}).get('max_dim')
    if raw is None or raw == '':
        return MAX_DIM
    # bool is an int subclass, and int() would quietly truncate floats
    if isinstance(raw, bool) or not isinstance(raw, (int, str)):
        raise ValueError(f"max_dim must be an integer, got {raw!r}")
    if isinstance(raw, str) and not raw.strip().lstrip('-').isdigit():
        raise ValueError(f"max_dim must be an integer, got {raw!r}")
    value = int(raw)
    if value < 1:
        raise ValueError(f"max_dim must be positive, got {value}")
    return value


@app.route('/api/convert', methods=['POST'])
def convert():
    """Convert an uploaded image or an image URL into pixel-grid JSON."""
    try:
        max_dim = read_max_dim()
    except (TypeError, ValueError) as e:
        return error_response('BadRequest', f'Invalid max_dim: {e}', 400)

    file_bytes = None
    filename = None
    file = request.files.get('image')
    if file is not None and file.filename:
        filename = secure_filename(file.filename)
        if not allowed_file(filename):
            return error_response(
                'BadRequest',
                f"Unsupported file type. Allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}",
                400,
            )
        file_bytes = file.read()

    url = request.form.get('url')
    if url is None and request.is_json:
        url = (request.get_json(silent=True) or {}).get('url')

    result = convert_image(
        file_bytes,
        url,
        filename=filename,
        max_dim=max_dim,
        image_service=image_service,
    )

    if not result.ok:
        status = STATUS_BY_ERROR.get(type(result.error), 500)
        return error_response(result.error.kind, result.error.message, status)

    response = Response(result.grid.to_json(), mimetype='application/json')
    response.headers['X-Pixel-Count'] = str(result.grid.pixel_count)
    if request.args.get('download') in ('1', 'true', 'yes'):
        response.headers['Content-Disposition'] = f'attachment; filename="{OUTPUT_FILENAME}"'
    return response


@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        'status': 'healthy',
        'message': 'PixelPorter API is running',
        'max_dim': MAX_DIM,
    })


@app.errorhandler(413)
def too_large(e):
    """Handle file too large error."""
    return error_response('PayloadTooLarge', f'File too large. Maximum size is {MAX_UPLOAD_SIZE_MB}MB.', 413)


@app.errorhandler(500)
def internal_error(e):
    """Handle internal server error."""
    logger.error(f"Internal server error: {e}")
    return error_response('InternalServerError', 'Internal server error', 500)


if __name__ == '__main__':
    host = os.getenv("API_HOST", "127.0.0.1")
    port = int(os.getenv("API_PORT", "5000"))
    print("🚀 Starting PixelPorter API Server...")
    print(f"🔧 Max upload size: {MAX_UPLOAD_SIZE_MB}MB")
    print(f"📐 Max output dimension: {MAX_DIM}px")
    print("🌐 CORS enabled for frontend communication")
    print("📋 Endpoints:")
    print("   POST /api/convert")
    print("   GET  /api/health")
    print("="*60)

    app.run(host=host, port=port, debug=False, threaded=True)
