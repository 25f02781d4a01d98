"""FastAPI application entry point."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from battlemap import __version__
from battlemap.api.routes import map_generation
from battlemap.config import get_settings
from battlemap.middleware.error_handler import setup_error_handlers

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("battlemap")

app = FastAPI(
    title="Battlemap Engine",
    description="Seeded tactical battlemap generation, position scoring and compact map encoding",
    version=__version__,
)


# Middleware to log ALL requests
@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.debug(f"[REQUEST] {request.method} {request.url.path}")
    response = await call_next(request)
    logger.debug(f"[RESPONSE] {request.method} {request.url.path} -> {response.status_code}")
    return response

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        settings.FRONTEND_URL,
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",  # Vite
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


setup_error_handlers(app, debug=settings.DEBUG)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "online", "service": "Battlemap Engine", "version": __version__}


@app.get("/api/health")
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "debug_mode": settings.DEBUG,
        "defaults": settings.generation_defaults(),
        "limits": {"max_map_size": settings.MAX_MAP_SIZE},
    }


# Routes
app.include_router(map_generation.router, prefix="/api", tags=["map_generation"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("battlemap.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
