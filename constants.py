import os
from dataclasses import dataclass

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 1337))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", None)

SEND_QUEUE_SIZE = int(os.getenv("SEND_QUEUE_SIZE", 64))
SEND_TIMEOUT = float(os.getenv("SEND_TIMEOUT", 5.0))
IDLE_TIMEOUT = float(os.getenv("IDLE_TIMEOUT", 0))  # 0 disables

WS_PING_INTERVAL = float(os.getenv("WS_PING_INTERVAL", 20.0))
WS_PING_TIMEOUT = float(os.getenv("WS_PING_TIMEOUT", 20.0))


@dataclass
class RelaySettings:
    """Per-app relay tuning. Defaults come from the environment."""
    send_queue_size: int = SEND_QUEUE_SIZE
    send_timeout: float = SEND_TIMEOUT
    idle_timeout: float = IDLE_TIMEOUT
