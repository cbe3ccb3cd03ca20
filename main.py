import uvicorn
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from config.settings import settings
from middleware.logging_middleware import RequestContextMiddleware
from routes.api import router as api_router
from routes.health import router as health_router
from services.llm_client import close_async_client
from services.pairing import get_pairing_tables
from utils.logger import setup_logger
from utils.prometheus_metrics import init_prometheus_metrics, get_prometheus_metrics

logger = setup_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting application lifespan")

    init_prometheus_metrics(enabled=settings.ENABLE_PROMETHEUS)

    # fail fast on a broken tables file
    tables = get_pairing_tables()
    logger.info(
        "Pairing tables ready",
        extra={"flavor_entries": len(tables.flavor_compatibility), "origins": len(tables.origin_affinity)}
    )

    yield

    await close_async_client()
    logger.info("Application shutdown complete")


app = FastAPI(title="Bunamo Pairing API", version="0.1.0", debug=settings.DEBUG, lifespan=lifespan)

app.add_middleware(RequestContextMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")
app.include_router(health_router, prefix="/api/v1")


@app.get("/")
def root():
    return {"app": "Bunamo", "status": "running"}


@app.get("/metrics")
def metrics():
    prometheus = get_prometheus_metrics()
    if prometheus is None or not prometheus.enabled:
        return Response(content="metrics disabled\n", media_type="text/plain", status_code=404)
    return Response(content=prometheus.generate_metrics(), media_type=prometheus.get_content_type())


if __name__ == "__main__":
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
