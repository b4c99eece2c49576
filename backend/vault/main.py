"""
Service Vault Backend - FastAPI Application

An access-controlled directory of shared service credentials.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from vault.config import get_settings
from vault.core.exceptions import (
    InvalidInputError,
    UnauthorizedError,
    UpstreamUnavailableError,
    VaultError,
)
from vault.core.logging_config import setup_logging
from vault.database.connections import close_connections, get_audit_database
from vault.database.databases import audit_db
from vault.routers import admin, auth, config, favorites, health, search
from vault.services.audit_service import AuditService
from vault.services.directory import DirectoryService
from vault.services.identity import get_identity_verifier
from vault.services.record_store import create_record_store

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    UnauthorizedError: status.HTTP_403_FORBIDDEN,
    UpstreamUnavailableError: status.HTTP_502_BAD_GATEWAY,
}


async def build_directory() -> DirectoryService:
    """Wire the record store and the audit sink into a DirectoryService."""
    audit_database = await get_audit_database()
    try:
        await audit_db.create_audit_indexes(audit_database)
        logger.info("Audit indexes ready")
    except Exception as e:
        logger.warning(f"Audit database initialization warning: {e}")
    return DirectoryService(create_record_store(), AuditService(audit_database))


def create_app(directory: Optional[DirectoryService] = None) -> FastAPI:
    """
    Build the application.

    A prebuilt ``directory`` replaces the one normally assembled at
    startup from configuration.
    """
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan manager.

        Startup:
        - Configure logging
        - Build the directory (record store, caches, audit sink)
        - Warm the catalog cache

        Shutdown:
        - Close the record store, identity client and database connections
        """
        setup_logging(settings.log_level)
        logger.info("Starting up Service Vault Backend...")

        app.state.directory = directory or await build_directory()
        count = len(await app.state.directory.get_services())
        logger.info(f"Catalog cache warmed with {count} services")

        yield

        logger.info("Shutting down Service Vault Backend...")
        await app.state.directory.close()
        verifier = await get_identity_verifier()
        await verifier.close()
        await close_connections()
        logger.info("Connections closed")

    app = FastAPI(
        title="Service Vault API",
        description="""
## Service Vault API

A shared directory of service accounts, filtered by group membership.

### Features
- **Search**: Substring search over service names and URLs
- **Popular**: Services ranked by recent successful searches
- **Favorites**: Per-user bookmarks
- **Admin**: Members, per-service permissions, search and audit logs

### Authentication
Sign in with a Google ID token via `POST /auth/google`, then pass the
returned JWT as a query parameter:
```
GET /search?q=aws&token=your_jwt_token
```
        """,
        version="0.1.0",
        lifespan=lifespan,
    )

    if directory is not None:
        app.state.directory = directory

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",  # Development
            "http://localhost:8080",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(VaultError)
    async def vault_error_handler(request: Request, exc: VaultError):
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        for error_type, code in ERROR_STATUS.items():
            if isinstance(exc, error_type):
                status_code = code
                break
        if status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    # Include routers
    app.include_router(health.router)
    app.include_router(config.router)
    app.include_router(auth.router)
    app.include_router(search.router)
    app.include_router(favorites.router)
    app.include_router(admin.router)

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint with API information."""
        return {
            "name": "Service Vault API",
            "version": "0.1.0",
            "docs": "/docs",
            "health": "/health",
        }

    return app


app = create_app()
