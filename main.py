#!/usr/bin/env python3
"""Main entry point for the Dare to Know tournament server."""

import logging
import os
import sys
from pathlib import Path

from daretoknow.engine.config import AppConfig, get_default_config
from daretoknow.engine.web import create_app


def setup_logging(level: str = "INFO"):
    """Configure logging for the web server."""
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    # Suppress noisy third-party loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def load_config() -> AppConfig:
    """Load the config file, then apply environment overrides."""
    config_path = Path(os.environ.get("DARETOKNOW_CONFIG", "daretoknow_config.json"))
    config = get_default_config(config_path)

    if "PORT" in os.environ:
        config.system.port = int(os.environ["PORT"])
    return config


def print_usage():
    """Print usage information for local development."""
    print("Dare to Know")
    print("=" * 40)
    print("   python main.py          start the server")
    print("   python main.py --help   show this message")
    print()
    print("Environment:")
    print("   DARETOKNOW_CONFIG  config file (default daretoknow_config.json)")
    print("   PORT               override the configured port")
    print("   ALLOWED_ORIGINS    comma-separated CORS origins")


def main():
    """Main entry point."""
    if "--help" in sys.argv or "-h" in sys.argv:
        print_usage()
        return

    config = load_config()
    setup_logging(config.system.log_level)

    import uvicorn

    port = config.system.port
    print("🎲 Starting Dare to Know server...")
    print(f"📡 API Documentation: http://localhost:{port}/docs")
    print(f"🔌 WebSocket: ws://localhost:{port}/v1/ws/game")

    uvicorn.run(
        create_app(config),
        host=config.system.host,
        port=port,
        log_level=config.system.log_level.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    main()
