import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import sessionmaker

from .config import ALLOWED_ORIGINS, LOG_LEVEL
from .database import create_db_engine, create_session_factory
from .domain.scheduling import router as calendar_router
from .domain.scheduling.repository import CalendarQueryError

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def create_app(session_factory: Optional[sessionmaker] = None) -> FastAPI:
    """
    Build the API.

    The database session factory is created once at startup (or injected, e.g.
    by tests) and every request gets its sessions from it through get_db.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Application starting up...")
        engine = None
        if getattr(app.state, "session_factory", None) is None:
            engine = create_db_engine()
            app.state.session_factory = create_session_factory(engine)
        yield
        logger.info("Application shutting down...")
        if engine is not None:
            engine.dispose()

    app = FastAPI(title="LiftOps Calendar API", version="1.0.0", lifespan=lifespan)
    app.state.session_factory = session_factory

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=422, content={"detail": jsonable_encoder(exc.errors())})

    @app.exception_handler(CalendarQueryError)
    async def calendar_query_exception_handler(request: Request, exc: CalendarQueryError):
        logger.error(f"❌ {request.method} {request.url.path} - Calendar query failed: {exc}")
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(calendar_router)

    @app.get("/")
    def root():
        return {"message": "LiftOps Calendar API is running"}

    @app.get("/health")
    def health():
        return {"status": "healthy"}

    @app.get("/health/db")
    def database_health_check(request: Request):
        """Check database connectivity for monitoring"""
        db = request.app.state.session_factory()
        try:
            start_time = time.time()
            db.execute(text("SELECT 1"))
            response_time = (time.time() - start_time) * 1000
            return {
                "status": "healthy",
                "database": {"connected": True, "response_time_ms": round(response_time, 2)},
            }
        except Exception as e:
            logger.error(f"❌ Database health check failed: {e}")
            return {"status": "unhealthy", "database": {"connected": False, "error": str(e)}}
        finally:
            db.close()

    return app


app = create_app()
