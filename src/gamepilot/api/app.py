from fastapi import FastAPI

from gamepilot.api.v1.router import api_router
from gamepilot.core.config import Settings, settings
from gamepilot.core.logging_config import configure_logging


def create_app(app_settings: Settings | None = None) -> FastAPI:
    s = app_settings or settings
    configure_logging(s.LOG_LEVEL)

    app = FastAPI(title="GamePilot Persona Engine")
    app.include_router(api_router, prefix=s.API_PREFIX)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
