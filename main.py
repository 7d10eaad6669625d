from contextlib import asynccontextmanager
from datetime import datetime
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from app.core.config import settings
from app.core.database import engine
from app.core.error_handlers import register_exception_handlers
from app.core.logging_config import setup_logging
from app.middleware.logging import AccessLogMiddleware
from app.api.v1.api import api_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    yield
    await engine.dispose()


# Create FastAPI app
app_config = {
    "title": "Marketplace Back Office API",
    "description": "Back office API for inputs, stock ledger and physical inventory counts",
    "version": "1.0.0",
    "lifespan": lifespan,
}

app = FastAPI(**app_config)

# Add middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=settings.ALLOWED_METHODS,
    allow_headers=settings.ALLOWED_HEADERS,
)
app.add_middleware(AccessLogMiddleware)

register_exception_handlers(app)

# Include routers
app.include_router(api_router, prefix="/api")

@app.get("/")
async def root():
    return {
        "message": "Marketplace Back Office API",
        "status": "active",
        "version": app_config["version"],
        "docs": "/docs",
    }

@app.get("/health")
async def health_check():
    database = "connected"
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception:
        database = "unavailable"

    return {
        "status": "healthy" if database == "connected" else "degraded",
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "components": {"database": database},
    }


def run_http():
    """Run HTTP server"""
    import uvicorn
    print("🚀 Starting HTTP server on port 3001...")
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=3001,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run_http()
