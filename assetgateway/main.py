#!/usr/bin/env python3
"""
Asset Gateway - Main Entry Point

This is the thin orchestration layer that:
1. Loads configuration
2. Wires the session manager into the API
3. Runs the API server and disconnects from the ledger on shutdown

All ledger logic is in the modules, following black box principles.
"""

import logging
import logging.config as log_config
from contextlib import asynccontextmanager
from typing import Any, List, Optional

import uvicorn
from dotenv import load_dotenv
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from assetgateway import __version__
from assetgateway.config import ConfigProvider, EnvConfigProvider
from assetgateway.logging_config import get_logging_config
from assetgateway.modules.api import (
    AssetChangeResponse,
    AssetCreateRequest,
    AssetUpdateRequest,
    ErrorResponse,
    HealthResponse,
)
from assetgateway.modules.assets import AssetService
from assetgateway.modules.gateway import (
    LedgerConnector,
    SessionManager,
    SessionState,
    ShutdownHook,
)
from assetgateway.modules.gateway.fabric import FabricConnector

load_dotenv()

# Configuration provider (centralized config access)
config_provider: ConfigProvider = EnvConfigProvider()
api_config = config_provider.get_api_config()

# Configure logging with health check suppression
log_config.dictConfig(get_logging_config(api_config.log_level))
logger = logging.getLogger(__name__)

ERROR_RESPONSES = {500: {"model": ErrorResponse}}

router = APIRouter()


# Dependency injection helpers
def get_asset_service(request: Request) -> AssetService:
    return request.app.state.asset_service


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def _failure(action: str, exc: Exception) -> JSONResponse:
    logger.error(f"Failed to {action}: {exc}")
    return JSONResponse(status_code=500, content={"error": str(exc)})


# Asset Endpoints


@router.post("/assets", response_model=AssetChangeResponse, responses=ERROR_RESPONSES)
async def create_asset(
    request: Optional[AssetCreateRequest] = None,
    assets: AssetService = Depends(get_asset_service),
):
    """
    Create an asset on the ledger.

    Returns:
        200: Asset created
        500: Ledger or session failure
    """
    try:
        return await assets.create_asset(request or AssetCreateRequest())
    except Exception as e:
        return _failure("create asset", e)


@router.get("/assets", response_model=List[Any], responses=ERROR_RESPONSES)
async def list_assets(assets: AssetService = Depends(get_asset_service)):
    """
    List all assets. An empty world state yields an empty list.

    Returns:
        200: Assets in ledger order
        500: Ledger or session failure
    """
    try:
        return await assets.list_assets()
    except Exception as e:
        return _failure("get all assets", e)


@router.get("/assets/{asset_id}", responses=ERROR_RESPONSES)
async def read_asset(asset_id: str, assets: AssetService = Depends(get_asset_service)):
    """
    Read one asset as stored on the ledger.

    Returns:
        200: Asset record
        500: Unknown asset, ledger or session failure
    """
    try:
        return await assets.read_asset(asset_id)
    except Exception as e:
        return _failure("read asset", e)


@router.put(
    "/assets/{asset_id}", response_model=AssetChangeResponse, responses=ERROR_RESPONSES
)
async def update_asset(
    asset_id: str,
    request: Optional[AssetUpdateRequest] = None,
    assets: AssetService = Depends(get_asset_service),
):
    """
    Update an asset's balance and transaction details.

    Returns:
        200: Asset updated
        500: Unknown asset, ledger or session failure
    """
    try:
        return await assets.update_asset(asset_id, request or AssetUpdateRequest())
    except Exception as e:
        return _failure("update asset", e)


@router.get("/assets/{asset_id}/history", response_model=List[Any], responses=ERROR_RESPONSES)
async def asset_history(asset_id: str, assets: AssetService = Depends(get_asset_service)):
    """
    Get every recorded version of an asset.

    Returns:
        200: Historical versions, oldest first as returned by the ledger
        500: Ledger or session failure
    """
    try:
        return await assets.asset_history(asset_id)
    except Exception as e:
        return _failure("get asset history", e)


# Health/Monitoring Endpoints


@router.get("/healthz")
async def healthz():
    """
    Minimal health check endpoint for container readiness/liveness probes.

    Returns:
        200: Service is running
    """
    return {"status": "ok"}


@router.get("/health", response_model=HealthResponse)
async def health_check(sessions: SessionManager = Depends(get_session_manager)):
    """
    Health check with ledger session details.

    The session connects lazily, so a disconnected session is not unhealthy.
    """
    config = sessions.config if sessions.state == SessionState.READY else None
    return HealthResponse(
        session=sessions.state.value,
        channel=config.channel_name if config else None,
        chaincode=config.chaincode_name if config else None,
        identity=config.identity_label if config else None,
        version=__version__,
    )


# Error handlers


async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Report unusable request bodies like any other failure."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg", ""))
    message = f"Invalid request: {'; '.join(messages)}"
    logger.error(message)
    return JSONResponse(status_code=500, content={"error": message})


def create_app(
    provider: Optional[ConfigProvider] = None,
    connector: Optional[LedgerConnector] = None,
    session_manager: Optional[SessionManager] = None,
) -> FastAPI:
    """
    Build the API around one SessionManager.

    Args:
        provider: Configuration source, environment by default
        connector: Ledger client, the Fabric SDK by default
        session_manager: Ready-made manager; overrides provider and connector
    """
    if session_manager is None:
        session_manager = SessionManager(
            provider or config_provider, connector or FabricConnector()
        )
    shutdown_hook = ShutdownHook(session_manager)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Manage application lifecycle. The ledger session itself is opened
        by the first request that needs it.
        """
        logger.info("Starting Asset Gateway API...")

        yield

        # Shutdown
        logger.info("Shutting down Asset Gateway API...")
        await shutdown_hook.run()
        logger.info("Asset Gateway API shutdown complete")

    app = FastAPI(
        title="Asset Gateway API",
        description="REST API for assets tracked on a Hyperledger Fabric channel",
        version=__version__,
        debug=api_config.debug,
        lifespan=lifespan,
    )
    app.state.session_manager = session_manager
    app.state.asset_service = AssetService(session_manager)
    app.state.shutdown_hook = shutdown_hook
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.include_router(router)
    return app


class GatewayServer(uvicorn.Server):
    """uvicorn server that tells the shutdown hook which signal stopped it."""

    def __init__(self, config: uvicorn.Config, shutdown_hook: ShutdownHook):
        super().__init__(config)
        self.shutdown_hook = shutdown_hook

    def handle_exit(self, sig: int, frame) -> None:
        self.shutdown_hook.record_signal(sig)
        super().handle_exit(sig, frame)


app = create_app()


def main() -> None:
    server = GatewayServer(
        uvicorn.Config(
            app,
            host=api_config.host,
            port=api_config.port,
            log_level=api_config.log_level.lower(),
            log_config=get_logging_config(api_config.log_level),
        ),
        app.state.shutdown_hook,
    )
    logger.info(f"Server running at http://{api_config.host}:{api_config.port}")
    server.run()


if __name__ == "__main__":
    main()
