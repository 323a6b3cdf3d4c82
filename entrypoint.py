import sys
import uvicorn
from constants import HOST, LOG_FILE, LOG_LEVEL, PORT, WS_PING_INTERVAL, WS_PING_TIMEOUT
from logging_config import setup_logging

# Setup logging before importing app
setup_logging(log_level=LOG_LEVEL, log_file=LOG_FILE)

from app import app
from logging_config import get_logger

logger = get_logger(__name__)


def main():
    logger.info(f"Starting signaling relay on {HOST}:{PORT}")
    try:
        # ws ping/pong evicts peers that vanished without a close frame
        uvicorn.run(
            app,
            host=HOST,
            port=PORT,
            log_config=None,
            ws_ping_interval=WS_PING_INTERVAL,
            ws_ping_timeout=WS_PING_TIMEOUT,
        )
    except SystemExit as e:
        # uvicorn exits this way when it cannot bind the listen socket
        if e.code:
            logger.error(f"Signaling relay stopped: could not serve on {HOST}:{PORT}")
        raise
    except Exception as e:
        logger.error(f"Signaling relay failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
