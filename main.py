import os
import sys
from pathlib import Path

import uvicorn

# Add project root to path
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.config_manager import config
from core.logger import get_logger, setup_logging

logger = get_logger("web")


def main():
    """Serve sync state and the sync trigger to local UI indicators."""
    setup_logging()

    reload_enabled = os.getenv("TELOFY_RELOAD", "0").lower() in {"1", "true", "yes"}
    host = os.getenv("TELOFY_HOST", "127.0.0.1")
    port = int(os.getenv("TELOFY_PORT", "8010"))

    logger.info("Sync status service on %s:%d, remote store %s", host, port, config.API_URL)
    uvicorn.run(
        "web.backend.app:app",
        host=host,
        port=port,
        reload=reload_enabled,
        reload_dirs=["web", "core", "interface"] if reload_enabled else None,
    )


if __name__ == "__main__":
    main()
