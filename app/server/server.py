from fastapi import FastAPI

from api.router import api_router
from infrastructure.services import get_settings
from server.lifespan import lifespan
from server.middleware import PathExemptCORSMiddleware, request_context_middleware

PUBLIC_PATH_PREFIX = "/api/v1/public/"


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="Push Dispatch", lifespan=lifespan)

    app.middleware("http")(request_context_middleware)
    app.add_middleware(
        PathExemptCORSMiddleware,
        exempt_prefixes=[PUBLIC_PATH_PREFIX],
        allow_origins=settings.server.CORS_ALLOW_ORIGINS,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    return app


handler = create_app()
