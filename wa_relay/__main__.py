#!/usr/bin/env python3
"""
Relay server entry point

Usage:
    python -m wa_relay
    PORT=9000 LOG_LEVEL=DEBUG python -m wa_relay
"""
import logging
import signal
import sys

from wa_relay.logging_config import configure_logging

logger = logging.getLogger(__name__)


def signal_handler(sig, frame):
    logger.info(f"Received signal {sig}, shutting down...")
    sys.exit(0)


def main():
    configure_logging()
    signal.signal(signal.SIGTERM, signal_handler)

    from wa_relay.app_factory import create_app

    app = create_app()
    host = app.config["HOST"]
    port = int(app.config["PORT"])
    logger.info(f"Server running on http://localhost:{port}")

    try:
        app.run(
            host=host,
            port=port,
            debug=False,
            threaded=True,
            use_reloader=False
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
        return 0
    except OSError as e:
        logger.error(f"Failed to start server on {host}:{port}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
