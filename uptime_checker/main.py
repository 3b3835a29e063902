from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings
from .errors import AuthNotConfigured, InvalidInput, NotFound, StoreFailure
from .logging_config import configure_logging
from .routers import auth as auth_router, pages, public
from .scheduler import SweepScheduler
from .services.monitor import ClientFactory, Monitor
from .services.store import KVStore, create_store

logger = structlog.get_logger(__name__)

def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(InvalidInput)
    async def _invalid_input(request: Request, ex: InvalidInput):
        return JSONResponse({"detail": str(ex)}, status_code=400)

    @app.exception_handler(NotFound)
    async def _not_found(request: Request, ex: NotFound):
        return JSONResponse({"detail": str(ex)}, status_code=404)

    @app.exception_handler(StoreFailure)
    async def _store_failure(request: Request, ex: StoreFailure):
        logger.error("store_failure", path=request.url.path, method=request.method, error=str(ex))
        return JSONResponse({"detail": "Internal Server Error"}, status_code=500)

    @app.exception_handler(AuthNotConfigured)
    async def _auth_not_configured(request: Request, ex: AuthNotConfigured):
        logger.error("login_failed", error=str(ex))
        return JSONResponse({"success": False, "message": "Login failed"}, status_code=500)

def create_app(settings: Optional[Settings] = None,
               store: Optional[KVStore] = None,
               client_factory: Optional[ClientFactory] = None) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings)

    app = FastAPI(title=settings.APP_TITLE, version=settings.APP_VERSION)
    app.state.settings = settings
    app.state.store = store or create_store(settings)
    app.state.monitor = Monitor(app.state.store, settings, client_factory=client_factory)
    app.state.scheduler = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    _install_error_handlers(app)

    @app.on_event("startup")
    async def _startup():
        await app.state.store.init()
        if settings.SCHEDULER_ENABLED:
            app.state.scheduler = SweepScheduler(app.state.monitor, settings.CHECK_CRON)
            app.state.scheduler.start()
        logger.info("app_started", title=settings.APP_TITLE, version=settings.APP_VERSION)

    @app.on_event("shutdown")
    async def _shutdown():
        if app.state.scheduler is not None:
            app.state.scheduler.stop()
        await app.state.store.close()

    app.include_router(public.router)
    app.include_router(auth_router.router)
    app.include_router(pages.router)
    return app
