# app.py
import logging
import sys
import threading
from dataclasses import dataclass

from flask import Flask
from werkzeug.serving import make_server

from .acceptor import UploadAcceptor
from .assets import AssetStore
from .bridge import EventBridge
from .config import APP_TITLE, Config, load_config
from .errors import ConfigInvalid
from .routes import register_routes
from .session import Session

logger = logging.getLogger(__name__)


@dataclass
class Services:
    session: Session
    bridge: EventBridge
    acceptor: UploadAcceptor
    assets: AssetStore


def create_app(config: Config, session: Session = None, bridge: EventBridge = None) -> Flask:
    if session is None:
        session = Session(config.upload_filename, config.upload_size)
    if bridge is None:
        bridge = EventBridge()

    config.upload_dir.mkdir(parents=True, exist_ok=True)

    app = Flask(__name__, static_folder=None)
    # allow some header overhead beyond the file size limit
    app.config.update(MAX_CONTENT_LENGTH=config.max_content_length)
    app.extensions["filesender"] = Services(
        session=session,
        bridge=bridge,
        acceptor=UploadAcceptor(session, bridge, config.upload_dir, config.staging_dir),
        assets=AssetStore(config.web_dir),
    )

    register_routes(app)
    return app


def start_server(app: Flask, config: Config) -> str:
    """Serve app from a daemon thread and return the bound address:port."""
    server = make_server(config.address, config.port, app, threaded=True)
    host, port = server.server_address[:2]
    address = f"[{host}]:{port}" if ":" in host else f"{host}:{port}"
    # there is no clean shutdown; the thread dies with the process
    threading.Thread(target=server.serve_forever, name="http", daemon=True).start()
    return address


def run_headless(bridge: EventBridge) -> None:
    stop = threading.Event()
    try:
        bridge.run_forever(stop)
    except KeyboardInterrupt:
        stop.set()


def main(argv=None) -> int:
    try:
        config = load_config(argv)
    except ConfigInvalid as e:
        print(f"error: {e.message}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    session = Session(config.upload_filename, config.upload_size)
    bridge = EventBridge()
    app = create_app(config, session, bridge)
    try:
        address = start_server(app, config)
    except OSError as e:
        logger.error("Could not listen on %s:%s: %s", config.address, config.port, e)
        return 1
    print(f"* Starting {APP_TITLE} on http://{address}")

    if config.headless:
        run_headless(bridge)
    else:
        from .gui import run_window
        run_window(session, bridge, address)
    return 0


if __name__ == "__main__":
    sys.exit(main())
