# routes/media.py
from flask import current_app, send_from_directory

from . import media_bp


@media_bp.route("/<path:path>", methods=["GET"])
def serve_media(path):
    """Public URLs handed out by the local file store"""
    return send_from_directory(current_app.config['UPLOAD_FOLDER'], path)
