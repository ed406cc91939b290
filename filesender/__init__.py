"""
FileSender - exchange files and notes with a browser on the same network.

The process runs a Flask server and a tkinter window side by side. The
window offers files for download and shows what peers upload; both sides
share one Session, and worker threads reach the window only through the
EventBridge.
"""

from .app import create_app, main
from .bridge import EventBridge
from .config import Config, load_config
from .session import Session

__version__ = "0.1.0"

__all__ = [
    'Config',
    'EventBridge',
    'Session',
    'create_app',
    'load_config',
    'main',
]
