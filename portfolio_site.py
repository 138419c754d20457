#!/usr/bin/env python3
"""
Portfolio Panel - Main Application
Wires the project store, renderer, pagination and dialog services into the web server
"""

import os
import sys
import argparse
import logging
from typing import List, Optional

from config.config import UnifiedConfig, get_config, initialize_config
from models.notification_buffer import NotificationBuffer, notification_buffer
from models.project import Project
from services.form_controller import FormController
from services.pagination_service import PaginationTracker
from services.project_store import ProjectStore
from services.store_backends import StoreBackend, create_backend
from services.view_renderer import ViewRenderer
from services.web_integration_service import WebIntegration
from utils.async_base import ServiceResult
from utils.async_utils import run_sync, shutdown_all

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


class PortfolioSite:
    """Main Portfolio application"""

    def __init__(
        self,
        config: Optional[UnifiedConfig] = None,
        backend: Optional[StoreBackend] = None,
        notifications: Optional[NotificationBuffer] = None,
    ):
        self.config = config or get_config()
        self.notifications = notifications or notification_buffer

        # Initialize services
        self.backend = backend or create_backend(self.config.store)
        self.store = ProjectStore(
            self.backend, self.notifications, ready_timeout=self.config.store.ready_timeout
        )
        self.tracker = PaginationTracker(
            self.config.site.items_per_page, self.config.site.sections.keys()
        )
        self.renderer = ViewRenderer(self.store, self.tracker, self.config.site)
        self.form_controller = FormController(self.store, self.notifications)

        # Initialize web interface
        self.web = WebIntegration(self)
        self.app = self.web.setup_flask_app()

    async def initialize(self) -> ServiceResult[List[Project]]:
        """Open the backing store and load the initial project list"""
        result = await self.store.initialize()
        if result.is_error:
            # The site stays usable; the error was already queued as a notification
            logger.error(f"Initial load failed: {result.error.message}")
        else:
            logger.info(f"Initial load complete: {result.message}")
        return result

    def start(self, host: Optional[str] = None, port: Optional[int] = None, debug: Optional[bool] = None):
        """Load the projects and serve the site until interrupted"""
        run_sync(self.initialize())

        server = self.config.server
        try:
            self.web.run(
                host=host or server.host,
                port=port or server.port,
                debug=self.config.debug if debug is None else debug,
            )
        finally:
            shutdown_all()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Portfolio site with project admin panel")
    parser.add_argument("--host", help="Interface to bind (default from config)")
    parser.add_argument("--port", type=int, help="Port to listen on (default from config)")
    parser.add_argument(
        "--backend",
        choices=["remote", "local"],
        help="Backing store to use (default from config)",
    )
    parser.add_argument("--store-url", help="Base URL of the remote document store")
    parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    # Command line options take precedence through the environment overrides
    if args.backend:
        os.environ["STORE_BACKEND"] = args.backend
    if args.store_url:
        os.environ["STORE_URL"] = args.store_url

    config = initialize_config().get_config()

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO), format=LOG_FORMAT
    )

    site = PortfolioSite(config)
    try:
        site.start(host=args.host, port=args.port, debug=args.debug or None)
    except KeyboardInterrupt:
        logger.info("Shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
