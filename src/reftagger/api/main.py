"""FastAPI application."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from reftagger.api.routes import router

app = FastAPI(
    title="reftagger",
    description="Tag Quran and Bible citations in HTML and preview their verses",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Tagged pages call /excerpt from the browser
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, prefix="/api/v1")


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "reftagger",
        "version": "0.1.0",
        "docs": "/docs",
        "api": "/api/v1",
    }
