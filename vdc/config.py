# vdc/config.py

import argparse
import os
from dataclasses import dataclass, replace


def _env_bool(name, default="false"):
    return os.getenv(name, default).lower() == "true"


@dataclass(frozen=True)
class Settings:
    """Process wide configuration, read once at startup"""

    port: int = 8080
    log_endpoint: str = ""  # empty = console only
    trace: bool = False  # only honoured when log_endpoint is set
    dal_endpoint: str = ""  # empty = mock mode
    host: str = "0.0.0.0"
    dal_connect_timeout: float = 5.0  # seconds
    log_level: str = "INFO"
    legacy_not_found_status: bool = False

    @property
    def log_enabled(self) -> bool:
        return self.log_endpoint != ""

    @property
    def trace_enabled(self) -> bool:
        return self.log_enabled and self.trace

    @property
    def dal_enabled(self) -> bool:
        return self.dal_endpoint != ""

    @classmethod
    def from_env(cls):
        return cls(
            port=int(os.getenv("VDC_PORT", 8080)),
            log_endpoint=os.getenv("VDC_LOG", ""),
            trace=_env_bool("VDC_TRACE"),
            dal_endpoint=os.getenv("VDC_DAL", ""),
            host=os.getenv("VDC_HOST", "0.0.0.0"),
            dal_connect_timeout=float(os.getenv("VDC_DAL_CONNECT_TIMEOUT", 5.0)),
            log_level=os.getenv("VDC_LOG_LEVEL", "INFO").upper(),
            legacy_not_found_status=_env_bool("VDC_LEGACY_NOT_FOUND_STATUS"),
        )


def build_parser(defaults: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mock-vdc", description="Mock virtual data container")
    parser.add_argument("--port", type=int, default=defaults.port, help="set the port to listen to")
    parser.add_argument("--host", default=defaults.host, help="interface to bind to")
    parser.add_argument("--trace", action=argparse.BooleanOptionalAction, default=defaults.trace,
                        help="use trace headers")
    parser.add_argument("--dal", default=defaults.dal_endpoint,
                        help="dal address to use, using fake data if empty")
    parser.add_argument("--log", default=defaults.log_endpoint,
                        help="log agent address to use, dont log if empty")
    parser.add_argument("--dal-connect-timeout", type=float, default=defaults.dal_connect_timeout,
                        help="seconds to wait for the dal connection at startup")
    parser.add_argument("--log-level", default=defaults.log_level)
    parser.add_argument("--legacy-not-found-status", action=argparse.BooleanOptionalAction,
                        default=defaults.legacy_not_found_status,
                        help="answer unknown routes with status 200 like the old service did")
    return parser


def parse_args(argv=None) -> Settings:
    """
    Builds the settings from the environment, then lets
    command line flags override them
    """
    defaults = Settings.from_env()
    args = build_parser(defaults).parse_args(argv)
    return replace(
        defaults,
        port=args.port,
        host=args.host,
        trace=args.trace,
        dal_endpoint=args.dal,
        log_endpoint=args.log,
        dal_connect_timeout=args.dal_connect_timeout,
        log_level=args.log_level.upper(),
        legacy_not_found_status=args.legacy_not_found_status,
    )
