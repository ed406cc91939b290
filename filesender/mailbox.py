# mailbox.py
import functools
import logging

from flask import render_template_string

from .config import APP_TITLE

logger = logging.getLogger(__name__)


def set_offered_note(session, text: str) -> None:
    """Called on the window's thread, which owns the offered note."""
    session.set_offered_note(text)


def deliver_received_note(session, bridge, text: str) -> None:
    """Called on a worker thread; the note lands when the bridge is drained."""
    logger.debug("Received note (%d chars)", len(text))
    bridge.schedule(functools.partial(session.set_received_note, text))


def render_index_page(template: str, session) -> str:
    # only the offered note and the catalog reach the page; the received
    # note is shown in the window alone
    snapshot = session.index_snapshot()
    return render_template_string(
        template,
        app_title=APP_TITLE,
        offered_note=snapshot.offered_note,
        downloads=snapshot.downloads,
    )
