from fastapi import FastAPI
from app.header import router as header_router
from app.logging_setup import configure_logging, logging_middleware


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="lascrs")
    app.middleware("http")(logging_middleware)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    app.include_router(header_router)
    return app

app = create_app()
