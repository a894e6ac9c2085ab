# paygate/main.py

from fastapi import FastAPI

from paygate.config import settings
from paygate.middleware import request_id_middleware
from paygate.routers import notify


def create_app() -> FastAPI:
    app = FastAPI(
        title="paygate",
        version=settings.APP_VERSION,
    )

    app.middleware("http")(request_id_middleware)

    # Gateway notifications
    app.include_router(notify.router, prefix="/v1/notify", tags=["Gateway Notifications"])

    @app.get("/")
    def root():
        return {"message": "paygate is running"}

    return app


app = create_app()
