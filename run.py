#!/usr/bin/env python3
"""
Banking Dashboard API Entry Point

Starts the FastAPI server with the banking dashboard API.
"""

import sys

import uvicorn

from bank_dashboard.config import get_config
from bank_dashboard.logging_config import get_logger, setup_logging


def run_server(host: str, port: int, debug: bool = False):
    """Run the FastAPI server"""
    uvicorn.run(
        "bank_dashboard.api:create_app",
        factory=True,
        host=host,
        port=port,
        reload=debug,
        log_level="info"
    )


if __name__ == "__main__":
    config = get_config()
    logger = setup_logging(config.log_level, config.log_format)
    logger.info(f"Banking Dashboard API starting on http://{config.api_host}:{config.api_port}")
    logger.info(f"Documentation at http://{config.api_host}:{config.api_port}/docs")
    
    try:
        run_server(host=config.api_host, port=config.api_port)
    except KeyboardInterrupt:
        get_logger().info("Shutting down Banking Dashboard API")
    except Exception as e:
        get_logger().error(f"Error starting server: {e}", exc_info=True)
        sys.exit(1)
