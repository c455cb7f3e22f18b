#!/usr/bin/env python3
"""
Main entry point for URL shortener service.

Concurrency: one uvicorn process serves requests on the event loop while an
asyncio task sweeps expired URLs once per sweep interval. All state lives in
process memory, so the service runs a single worker.

Usage:
    python app.py

Environment variables:
    BASE_URL - Base URL for short links
    PORT - Port to listen on
    DEFAULT_VALIDITY_MINUTES - Validity when a request omits one
    SWEEP_INTERVAL_SECONDS - Seconds between expiry sweeps
    LOG_LEVEL - Logging level
    LOG_JSON - Set to true for JSON log lines
"""

import signal
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from config import Config, load_config
from shortener.common.clock import Clock, utc_now
from shortener.common.logging_config import get_logger, setup_logging
from shortener.geo import LocationResolver, SimulatedLocationResolver
from shortener.ledger import ClickLedger
from shortener.registry import Registry
from shortener.service import URLShortenerService
from shortener.shortcode import ShortCodeGenerator
from shortener.sweeper import ExpirySweeper
from web_app import create_app


def build_service(
    config: Config,
    clock: Clock = utc_now,
    location_resolver: Optional[LocationResolver] = None,
) -> URLShortenerService:
    """Wire the registry, ledger, sweeper and service from configuration.

    Args:
        config: Application configuration
        clock: Time source for the registry
        location_resolver: Geolocation lookup (simulated if not given)

    Returns:
        Service with its sweeper attached (not yet started)
    """
    ledger = ClickLedger(logger=get_logger("ledger"))
    registry = Registry(
        ledger=ledger,
        short_code_generator=ShortCodeGenerator(default_length=config.short_code_length),
        clock=clock,
        default_validity_minutes=config.default_validity_minutes,
        max_collision_retries=config.max_collision_retries,
        reserved_shortcodes=config.reserved_shortcode_set,
        logger=get_logger("registry"),
    )
    sweeper = ExpirySweeper(
        registry=registry,
        interval_seconds=config.sweep_interval_seconds,
        logger=get_logger("sweeper"),
    )
    return URLShortenerService(
        registry=registry,
        ledger=ledger,
        location_resolver=location_resolver or SimulatedLocationResolver(seed=config.geo_seed),
        sweeper=sweeper,
        base_url=config.base_url,
        path_prefix=config.path_prefix,
        enable_custom_codes=config.enable_custom_codes,
        logger=get_logger("service"),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    logger = app.state.logger
    service = app.state.service

    logger.info("Starting URL shortener service...")
    if service.sweeper:
        service.sweeper.start()
    logger.info("Service started successfully")

    yield

    logger.info("Shutting down URL shortener service...")
    if service.sweeper:
        await service.sweeper.stop()
    logger.info("Service stopped")


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
        service=config.service_name,
    )

    logger.info("URL Shortener Service")
    logger.info(f"Configuration: {config.model_dump()}")

    service = build_service(config)
    app = create_app(
        service_instance=service,
        config=config,
        lifespan=lifespan,
        logger=get_logger("web"),
    )

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        access_log=False,  # LoggingMiddleware covers requests
    )

    server = uvicorn.Server(uvicorn_config)

    # Setup signal handlers for graceful shutdown
    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
