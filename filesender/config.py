# config.py
import argparse
import ipaddress
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence

from .errors import ConfigInvalid
from .utils import is_safe_filename

APP_TITLE = "FileSender"

DEFAULT_ADDRESS = "0.0.0.0"
DEFAULT_PORT = 44333
DEFAULT_UPLOAD_FILENAME = "Upload.file"
DEFAULT_UPLOAD_SIZE = 50_000_000          # bytes
UPLOAD_OVERHEAD = 1024 * 1024             # multipart boundaries and part headers
STAGING_DIRNAME = ".staging"

WEB_DIR = Path(__file__).resolve().parent / "web"


@dataclass(frozen=True)
class Config:
    address: str = DEFAULT_ADDRESS
    port: int = DEFAULT_PORT
    upload_filename: str = DEFAULT_UPLOAD_FILENAME
    upload_size: int = DEFAULT_UPLOAD_SIZE
    upload_dir: Path = Path(".")
    web_dir: Path = WEB_DIR
    headless: bool = False
    verbose: bool = False

    @property
    def staging_dir(self) -> Path:
        return self.upload_dir / STAGING_DIRNAME

    @property
    def max_content_length(self) -> int:
        return self.upload_size + UPLOAD_OVERHEAD


def build_parser(environ: Mapping[str, str]) -> argparse.ArgumentParser:
    """Command line options; environment variables provide the defaults."""
    parser = argparse.ArgumentParser(
        prog="filesender",
        description="Send and receive files using a website",
    )
    parser.add_argument("-a", "--address", default=environ.get("HOST", DEFAULT_ADDRESS),
                        help="The address for the server to listen")
    parser.add_argument("-p", "--port", default=environ.get("PORT", str(DEFAULT_PORT)),
                        help="The port for the server to listen")
    parser.add_argument("-u", "--upload-filename",
                        default=environ.get("UPLOAD_FILENAME", DEFAULT_UPLOAD_FILENAME),
                        help="The filename that will be used to save uploaded files")
    parser.add_argument("-s", "--upload-size",
                        default=environ.get("UPLOAD_SIZE", str(DEFAULT_UPLOAD_SIZE)),
                        help="The maximum size for uploaded files")
    parser.add_argument("-d", "--upload-dir", default=environ.get("UPLOAD_DIR", "."),
                        help="The directory where uploaded files are stored")
    parser.add_argument("--web-dir", default=None,
                        help="Serve index.html and static/ from this directory")
    parser.add_argument("--headless", action="store_true",
                        help="Run the server without opening a window")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")
    return parser


def _parse_address(value: str) -> str:
    try:
        return str(ipaddress.ip_address(value.strip()))
    except ValueError:
        raise ConfigInvalid(f"invalid address {value!r}: expected an IPv4 or IPv6 address")


def _parse_int(option: str, value: str, lo: int, hi: Optional[int] = None) -> int:
    try:
        number = int(str(value).strip(), 10)
    except ValueError:
        raise ConfigInvalid(f"invalid {option} {value!r}: expected an integer")
    if number < lo or (hi is not None and number > hi):
        bounds = f"{lo}..{hi}" if hi is not None else f">= {lo}"
        raise ConfigInvalid(f"invalid {option} {value!r}: must be {bounds}")
    return number


def load_config(argv: Optional[Sequence[str]] = None,
                environ: Optional[Mapping[str, str]] = None) -> Config:
    """Parse and validate the startup configuration, raising ConfigInvalid."""
    environ = os.environ if environ is None else environ
    args = build_parser(environ).parse_args(argv)

    upload_filename = args.upload_filename
    if not upload_filename or not is_safe_filename(upload_filename):
        raise ConfigInvalid(
            f"invalid upload filename {upload_filename!r}: only letters, digits, '.', '_' and '-' are allowed"
        )

    upload_dir = Path(args.upload_dir)
    if upload_dir.exists() and not upload_dir.is_dir():
        raise ConfigInvalid(f"invalid upload directory {args.upload_dir!r}: not a directory")

    web_dir = Path(args.web_dir) if args.web_dir else WEB_DIR
    if not web_dir.is_dir():
        raise ConfigInvalid(f"invalid web directory {args.web_dir!r}: not a directory")

    return Config(
        address=_parse_address(args.address),
        port=_parse_int("port", args.port, 0, 65535),
        upload_filename=upload_filename,
        upload_size=_parse_int("upload size", args.upload_size, 0),
        upload_dir=upload_dir,
        web_dir=web_dir,
        headless=args.headless,
        verbose=args.verbose,
    )
