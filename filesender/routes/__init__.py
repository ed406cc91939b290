# routes/__init__.py
import logging

from flask import jsonify

from ..errors import FileSenderError
from .core import bp as core_bp
from .data import bp as data_bp

logger = logging.getLogger(__name__)


def handle_error(e: FileSenderError):
    logger.info("%s %s: %s", e.status, e.code, e.message)
    return jsonify(error=e.code, message=e.message), e.status


def register_routes(app):
    app.register_blueprint(core_bp)
    app.register_blueprint(data_bp)
    app.register_error_handler(FileSenderError, handle_error)
