# app/main.py
import logging

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .catalog import BookNotFound, InvalidBookInput, catalog_router
from .catalog.schemas import Envelope
from .config import get_settings


logger = logging.getLogger(__name__)

app = FastAPI(
    title="Book Catalog Service",
    description=(
        "Minimal CRUD microservice over an in-memory collection of books. "
        "Nothing is persisted: the catalogue is reset to its seed records "
        "on every restart."
    ),
    version="1.0.0",
)

app.include_router(catalog_router)


def _fail(status_code: int, message: str) -> JSONResponse:
    envelope = Envelope(status="fail", message=message)
    return JSONResponse(status_code=status_code, content=envelope.to_content())


@app.exception_handler(BookNotFound)
async def book_not_found_handler(request: Request, exc: BookNotFound):
    logger.debug("%s %s -> 404: %s", request.method, request.url.path, exc.message)
    return _fail(status.HTTP_404_NOT_FOUND, exc.message)


@app.exception_handler(InvalidBookInput)
async def invalid_book_input_handler(request: Request, exc: InvalidBookInput):
    logger.debug("%s %s -> 400: %s", request.method, request.url.path, exc.fields)
    return _fail(status.HTTP_400_BAD_REQUEST, exc.message)


# Liveness check, outside the /books envelope contract
@app.get("/")
def health_check():
    return {"status": "ok", "message": "Book catalog is up"}


class CatalogServer(uvicorn.Server):
    """uvicorn server that announces the catalogue once the socket is bound."""

    async def startup(self, sockets=None) -> None:
        await super().startup(sockets=sockets)
        # uvicorn exits on a failed bind, so reaching here means we are listening
        if self.started:
            port = self.config.port
            logger.info("Server is running on port %s", port)
            logger.info("Access API at http://localhost:%s/books", port)


def run() -> None:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    config = uvicorn.Config(
        app, host=settings.host, port=settings.port, log_level=settings.log_level
    )
    CatalogServer(config).run()


if __name__ == "__main__":
    run()
