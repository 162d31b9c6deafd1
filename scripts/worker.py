#!/usr/bin/env python3
"""Background worker script for processing deferred tasks (CV summaries)"""

import asyncio
import logging
import signal
import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from backend.app.core.config import settings
from backend.app.core.logging import setup_logging
from backend.app.core.task_queue import task_queue
from backend.app.services.background_processor import background_processor
# Registers the cv_summary handler
from backend.app.services import summary_tasks  # noqa: F401

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)


class WorkerManager:
    """Manager for background worker loops"""

    def __init__(self, num_workers: int = 2):
        self.num_workers = num_workers
        self.shutdown_event = asyncio.Event()

    async def start(self):
        """Start the worker manager"""
        logger.info(f"Starting worker manager with {self.num_workers} workers")

        loop = asyncio.get_running_loop()
        for sig in [signal.SIGTERM, signal.SIGINT]:
            loop.add_signal_handler(sig, self._signal_handler, sig)

        try:
            await task_queue.connect()
            await background_processor.start_workers(self.num_workers)

            await self.shutdown_event.wait()

        except Exception as e:
            logger.error(f"Worker manager error: {e}")
            raise
        finally:
            await background_processor.stop_workers()
            await task_queue.disconnect()
            logger.info("Worker manager stopped")

    def _signal_handler(self, signum):
        """Handle shutdown signals"""
        logger.info(f"Received signal {signum}, initiating shutdown")
        self.shutdown_event.set()


async def main():
    """Main worker entry point"""
    import argparse

    parser = argparse.ArgumentParser(description="Smarter AI Recruiter Background Worker")
    parser.add_argument(
        "--workers",
        type=int,
        default=2,
        help="Number of concurrent worker loops (default: 2)"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Log level (default: INFO)"
    )

    args = parser.parse_args()

    logging.getLogger().setLevel(getattr(logging, args.log_level))

    logger.info("Starting Smarter AI Recruiter Worker")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Redis URL: {settings.REDIS_URL}")
    logger.info(f"Workers: {args.workers}")
    logger.info(f"Handlers: {sorted(background_processor.task_handlers)}")

    manager = WorkerManager(num_workers=args.workers)

    try:
        await manager.start()
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt")
    except Exception as e:
        logger.error(f"Worker failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
