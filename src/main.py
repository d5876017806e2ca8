"""
Local Inference Service Discovery - Main Entry Point
"""

import asyncio
import signal
import sys
import logging
import os

import uvicorn

from config_loader import DEFAULT_CONFIG_PATH, load_config, setup_logging
from api.main_api import LocalServiceAPI
from services.local_service import LocalServiceManager

logger = logging.getLogger(__name__)

async def serve_api(manager: LocalServiceManager, config: dict):
    """Serve the local API until a shutdown signal arrives"""
    api = LocalServiceAPI(manager, config)
    server_config = uvicorn.Config(
        api.app,
        host=config['api']['host'],
        port=config['api']['port'],
        log_level="info",
        access_log=False  # We handle our own logging
    )
    server = uvicorn.Server(server_config)

    logger.info(f"Starting API server on {config['api']['host']}:{config['api']['port']}")
    await server.serve()

async def main():
    """Main entry point"""
    config_path = os.environ.get('CONFIG_FILE', DEFAULT_CONFIG_PATH)
    config = load_config(config_path)
    setup_logging(config)
    logger.info(f"Using configuration file: {config_path}")

    manager = LocalServiceManager(config)
    try:
        status = await manager.initialize()
        print(f"{status.status}: {status.message}"
              + (f" ({status.endpoint}, {status.model_count} model(s))" if status.endpoint else ""))

        if config['api']['enabled']:
            await serve_api(manager, config)
            return 0

        return 0 if status.status == "ready" else 1

    except Exception as e:
        logger.error(f"Discovery failed: {e}")
        return 1
    finally:
        await manager.close()

if __name__ == "__main__":
    # uvicorn installs its own handlers while serving; this covers discovery
    signal.signal(signal.SIGTERM, lambda signum, frame: sys.exit(0))

    try:
        exit_code = asyncio.run(main())
        sys.exit(exit_code)
    except KeyboardInterrupt:
        print("\nStopped by user")
        sys.exit(0)
