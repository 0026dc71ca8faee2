import logging
import traceback
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from jobportal.config import Settings
from jobportal.database import get_engine, init_db, make_session_factory
from jobportal.errors import format_validation_errors
from jobportal.routers import admin, applications, auth, jobs
from jobportal.utils.filesystem import ensure_upload_dir

logger = logging.getLogger("jobportal")

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db(app.state.engine)
    logger.info("Environment: %s", app.state.settings.environment)
    yield
    app.state.engine.dispose()


def _install_error_handlers(app: FastAPI, settings: Settings):
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"message": format_validation_errors(exc.errors())})

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        if settings.is_production:
            return JSONResponse(status_code=500, content={"message": "Internal Server Error"})
        return JSONResponse(
            status_code=500,
            content={
                "message": str(exc) or exc.__class__.__name__,
                "error": "".join(traceback.format_exception(exc)),
            },
        )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()

    app = FastAPI(
        title="Job Portal",
        description="Job board API: postings, applications and admin management",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = get_engine(settings)
    app.state.session_factory = make_session_factory(app.state.engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.frontend_urls,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    _install_error_handlers(app, settings)

    app.include_router(auth.router, prefix=settings.api_prefix)
    app.include_router(jobs.router, prefix=settings.api_prefix)
    app.include_router(applications.router, prefix=settings.api_prefix)
    app.include_router(admin.router, prefix=settings.api_prefix)

    upload_dir = ensure_upload_dir(settings.upload_dir)
    app.mount("/uploads", StaticFiles(directory=str(upload_dir)), name="uploads")

    @app.get("/")
    async def root():
        return {"message": "Welcome To Job Portal", "version": VERSION, "status": "Server is running"}

    @app.get("/health")
    async def health():
        return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}

    return app
