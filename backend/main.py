import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from api.routes import router
from config import settings
from services.completion_service import CompletionService, GeminiCompletionService
from services.errors import LinkNotFoundError, LinkValidationError
from services.link_store import LinkStore

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger("task_links")

def cors_allows_credentials(origins) -> bool:
    return "*" not in origins

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Server running on http://localhost:{settings.port}")
    yield

def create_app(link_store: LinkStore = None, completion_service: CompletionService = None) -> FastAPI:
    app = FastAPI(title="Task Link Assistant", version="0.1.0", debug=settings.debug, lifespan=lifespan)

    # Shortcuts live as long as the app does
    app.state.link_store = link_store if link_store is not None else LinkStore()
    app.state.completion_service = completion_service or GeminiCompletionService()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        # No credentials alongside a wildcard origin
        allow_credentials=cors_allows_credentials(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(LinkValidationError)
    async def _validation_error_handler(request: Request, exc: LinkValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(LinkNotFoundError)
    async def _not_found_handler(request: Request, exc: LinkNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.exception_handler(Exception)
    async def _global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    app.include_router(router, prefix="/api")

    @app.get("/")
    async def root():
        return {"message": "Task Link Assistant API"}

    return app

app = create_app()

def run():
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())

if __name__ == "__main__":
    run()
