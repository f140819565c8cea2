from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dive.api.routes import dive as dive_routes
from dive.config import settings
from dive.services.logger import get_logger

log = get_logger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info(f"Dive service starting (model={settings.dive_model})")
    yield
    log.info("Dive service stopped")


app = FastAPI(
    title="Dive",
    description="Candidate content acquisition and answer synthesis",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes
app.include_router(dive_routes.router)


@app.get("/api/health")
async def health():
    return {"status": "ok", "service": "dive"}
