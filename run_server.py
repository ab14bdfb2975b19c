"""
Scheduling API Server Runner
Run this from the repo root: python run_server.py
"""

import logging
import sys
from pathlib import Path

import uvicorn

# Add repo root to path
sys.path.insert(0, str(Path(__file__).parent))

from homecare.config import LOG_LEVEL, SERVER_HOST, SERVER_PORT, SERVER_RELOAD

logger = logging.getLogger(__name__)


def main():
    logger.info(f"Starting scheduling API on {SERVER_HOST}:{SERVER_PORT}")
    uvicorn.run(
        "homecare.main:app",
        host=SERVER_HOST,
        port=SERVER_PORT,
        reload=SERVER_RELOAD,
        log_level=LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    try:
        main()
    except KeyboardInterrupt:
        logger.info("Scheduling API stopped by user")
