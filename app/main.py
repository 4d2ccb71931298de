from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from slowapi.errors import RateLimitExceeded
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from timing_asgi import TimingMiddleware, TimingClient  # type: ignore
from timing_asgi.integrations import StarletteScopeToName  # type: ignore

from app.core import config
from app.core.database.engine import Database
from app.core.errors import AppError
from app.features.users.routes import auth_router, profile_router
from app.features.permissions.routes import router as permission_router, role_router
from app.features.applications.routes import router as application_router
from app.features.contacts.routes import router as contact_router
from app.features.users.dependencies import limiter
from app.utils import get_logger


log = get_logger(__name__)


class PrintTimings(TimingClient):
    def timing(self, metric_name, timing, tags):
        log.debug(dict(route=metric_name.removeprefix("main.app.features."), timing=timing, tags=tags))


async def validation_exception_handler(_request: Request, exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        if "loc" not in error or "msg" not in error:
            continue
        key = error["loc"][-1]
        if key == "__root__":
            key = "root"
        errors.append(f"{key}: {error['msg']}")
    log.info("Request validation error %s", errors)
    return JSONResponse(status_code=400, content=jsonable_encoder({"errors": errors}))


async def app_error_handler(_request: Request, exc: AppError) -> Response:
    log.warning("%s: %s", type(exc).__name__, exc.message)
    return JSONResponse({"detail": exc.message}, status_code=exc.status_code)


def rate_limit_exceeded_handler(_request: Request, _exc: RateLimitExceeded) -> Response:
    return JSONResponse({"error": "You are going too fast"}, status_code=429)


async def unhandled_exception_handler(request: Request, exc: Exception) -> Response:
    log.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse({"message": "Internal server error"}, status_code=500)


def create_app(database_url: str | None = None) -> FastAPI:
    """
    Build the API application.

    The database handle is created here and owned by the app lifespan:
    tables are created on startup and the engine is disposed on shutdown.
    """
    database = Database(database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info("Initializing database...")
        await database.init()
        log.info("Database initialized successfully")
        yield
        await database.dispose()
        log.info("Database connections closed")

    log.info("Initializing server")
    app = FastAPI(
        title="Job Application Tracker",
        description="Role-based access API for job applications and contacts",
        version="0.1.0",
        docs_url="/docs" if config.ENABLE_DOCS else None,
        redoc_url="/redoc" if config.ENABLE_DOCS else None,
        openapi_url="/openapi.json" if config.ENABLE_DOCS else None,
        lifespan=lifespan,
    )
    app.state.db = database
    # Routes opt in with @rate_limited; the limiter is shared by every app instance
    app.state.limiter = limiter

    app.add_middleware(TimingMiddleware, client=PrintTimings(), metric_namer=StarletteScopeToName("main", app))

    if config.ENABLE_DOCS:
        log.warning("Docs enabled")
    if config.ALLOW_ORIGIN:
        log.warning("Setting allow origin to %s", config.ALLOW_ORIGIN)
        origins = [config.ALLOW_ORIGIN]
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.get("/")
    async def root():
        """Root endpoint - API health check."""
        return {
            "message": "Job Application Tracker API",
            "version": "0.1.0",
            "status": "online",
            "docs": "/docs" if config.ENABLE_DOCS else None,
            "authentication": {
                "info": "Protected endpoints require Bearer token in Authorization header",
                "login": "/auth/login",
            },
        }

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy"}

    # Include routers
    app.include_router(auth_router, prefix="/auth", tags=["auth"])
    app.include_router(profile_router, prefix="/profile", tags=["profile"])
    app.include_router(permission_router, prefix="/permissions", tags=["permissions"])
    app.include_router(role_router, prefix="/roles", tags=["roles"])
    app.include_router(application_router, prefix="/applications", tags=["applications"])
    app.include_router(contact_router, prefix="/contacts", tags=["contacts"])

    return app


app = create_app()
