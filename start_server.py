#!/usr/bin/env python3
"""
Start the CareerBoard API with uvicorn.
"""
import argparse
import logging
import sys

import uvicorn
from dotenv import load_dotenv

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main():
    load_dotenv()
    from careerboard.backend.config.settings import get_settings

    settings = get_settings()

    parser = argparse.ArgumentParser(description="CareerBoard API server")
    parser.add_argument("--host", default="0.0.0.0", help="Interface to bind")
    parser.add_argument("--port", type=int, default=5000, help="Port to listen on")
    parser.add_argument("--reload", action="store_true", default=settings.reload_on_change,
                        help="Restart on code changes")
    args = parser.parse_args()

    issues = settings.validate_required_settings()
    if issues and settings.is_production():
        for issue in issues:
            logger.error("Configuration error: %s", issue)
        sys.exit(1)

    logger.info("Starting %s on http://%s:%d (%s)", settings.app_name, args.host, args.port, settings.environment)
    if settings.api_docs_enabled:
        logger.info("API docs: http://localhost:%d/docs", args.port)

    uvicorn.run(
        "careerboard.backend.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
