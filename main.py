from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agricomms.config import get_settings
from agricomms.container import Container, build_container
from agricomms.interfaces.api.errors import register_exception_handlers
from agricomms.interfaces.api.routes import register_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Construit les services au démarrage et libère les ressources à l'arrêt."""

    container = getattr(app.state, "container", None)
    if container is None:
        container = build_container()
        app.state.container = container
    yield
    container.close()


def create_app(container: Container | None = None) -> FastAPI:
    """Crée et configure l'application FastAPI principale.

    ``container`` remplace les services construits au démarrage.
    """

    app = FastAPI(title="agricomms", lifespan=lifespan)
    if container is not None:
        app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_settings().cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    register_routes(app)
    return app


app = create_app()
