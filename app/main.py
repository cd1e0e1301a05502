import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import Settings, settings as default_settings
from app.core.database import build_engine, create_db_and_tables
from app.core.errors import register_exception_handlers
from app.core.request_id import RequestIdMiddleware, configure_logging
from app.routers import auth, menu, products
from app.services.email_service import DeliveryStats, Mailer

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Construir la aplicación con su configuración, mailer y contadores"""
    settings = settings or default_settings
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Eventos que se ejecutan al iniciar la aplicación"""
        if settings.auto_create_db:
            create_db_and_tables(app.state.engine)
        logger.info("%s %s iniciada (email: %s)", settings.app_name, settings.app_version, settings.email_backend)
        yield

    # Crear la aplicación FastAPI
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="API de Storefront - registro, login y catálogo",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = build_engine(settings.database_url, echo=settings.sql_echo)
    app.state.mailer = Mailer(settings)
    app.state.delivery_stats = DeliveryStats()

    # Configurar CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIdMiddleware)
    register_exception_handlers(app)

    # Incluir routers
    app.include_router(auth.router, prefix="/api")
    app.include_router(menu.router, prefix="/api")
    app.include_router(products.router, prefix="/api")

    @app.get("/")
    def read_root():
        """Endpoint raíz de la API"""
        return {
            "message": f"Welcome to the {settings.app_name}",
            "version": settings.app_version,
            "docs": "/docs",
        }

    @app.get("/health")
    def health_check(request: Request):
        """Endpoint para verificar el estado de la API y de los envíos de email"""
        return {
            "status": "healthy",
            "app": settings.app_name,
            "email": request.app.state.delivery_stats.snapshot(),
        }

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("app.main:app", host=default_settings.host, port=default_settings.port)


if __name__ == "__main__":
    run()
