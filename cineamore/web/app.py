"""
Application FastAPI de CineAmore.

Initialise l'application web avec le Container DI, enregistre le
gestionnaire d'erreurs du domaine et monte les routes.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .. import __version__
from ..container import Container
from ..core.errors import (
    CineAmoreError,
    ExternalServiceError,
    InvalidStateError,
    NotFoundError,
    StoreError,
    Unauthorized,
    ValidationError,
)
from ..logging_config import configure_logging
from .routes.admin import router as admin_router
from .routes.auth import router as auth_router
from .routes.catalogue import router as catalogue_router
from .routes.contributor import router as contributor_router

# Ordre significatif : premier type correspondant
_STATUS_CODES = (
    (ValidationError, 400),
    (Unauthorized, 403),
    (NotFoundError, 404),
    (InvalidStateError, 409),
    (ExternalServiceError, 502),
    (StoreError, 500),
)


def status_for(error: CineAmoreError) -> int:
    for error_type, status_code in _STATUS_CODES:
        if isinstance(error, error_type):
            return status_code
    return 500


async def handle_domain_error(request: Request, exc: CineAmoreError) -> JSONResponse:
    """Convertit une erreur du domaine en {"error", "details"}."""
    return JSONResponse(
        {"error": exc.message, "details": exc.details},
        status_code=status_for(exc),
    )


def create_app(container: Optional[Container] = None) -> FastAPI:
    """
    Construit l'application.

    Args:
        container: Container préconfiguré (tests) ; un Container par défaut sinon
    """
    container = container or Container()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Configure le logging, ouvre la base au démarrage et libère tout à l'arrêt."""
        configure_logging(container.config())
        container.init_resources()
        try:
            yield
        finally:
            client = container.tmdb_client()
            if client is not None:
                await client.close()
            container.shutdown_resources()

    app = FastAPI(title="CineAmore", version=__version__, lifespan=lifespan)
    app.state.container = container
    app.add_exception_handler(CineAmoreError, handle_domain_error)

    app.include_router(auth_router)
    app.include_router(catalogue_router)
    app.include_router(contributor_router)
    app.include_router(admin_router)
    return app


app = create_app()
