from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import logging

from domain.errors import KnowledgeBaseNotFoundError, KnowledgeBaseNotLoadedError

logger = logging.getLogger(__name__)

def attach_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(KnowledgeBaseNotFoundError)
    async def _kb_not_found(request: Request, exc: KnowledgeBaseNotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(KnowledgeBaseNotLoadedError)
    async def _kb_not_loaded(request: Request, exc: KnowledgeBaseNotLoadedError):
        logger.warning("Request %s needs a loaded knowledge base", request.url.path)
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        logger.exception("Unhandled: %s", exc)
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})
