from fastapi import Request
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Crear un motor de base de datos para la URL dada"""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # SQLite no permite compartir la conexión entre hilos por defecto
        connect_args["check_same_thread"] = False
    return create_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,   # Verificar conexiones antes de usarlas
        connect_args=connect_args,
    )


def create_db_and_tables(bind: Engine) -> None:
    """Crear todas las tablas en la base de datos"""
    import app.models  # noqa: F401  registra las tablas en el metadata

    SQLModel.metadata.create_all(bind)


def get_session(request: Request):
    """Generador de sesiones sobre el motor de la aplicación (app.state.engine)"""
    with Session(request.app.state.engine) as session:
        yield session
