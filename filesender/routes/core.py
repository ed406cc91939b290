# routes/core.py
from flask import Blueprint, current_app

from ..mailbox import render_index_page

bp = Blueprint("core", __name__)


def _services():
    return current_app.extensions["filesender"]


@bp.get("/")
def index():
    services = _services()
    template = services.assets.read_text("index.html")
    return render_index_page(template, services.session)


@bp.get("/static/<path:asset>")
def static_asset(asset: str):
    return _services().assets.send_static(asset)
