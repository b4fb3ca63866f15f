"""
FastAPI Main Application

This script wires the emotion routes, CORS and error handlers and runs the
FastAPI server on port 8000.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn
import logging

from fusion import api as emotion_api
from fusion.config_loader import load_config
from utils.errors import ConfigurationError

# Setup logging with timestamps
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger(__name__)

_cors_config = load_config().get("cors", {})

# Create FastAPI app instance
app = FastAPI(
    title="EmpathAI Companion API",
    description="Text and vision emotion fusion with empathetic responses",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_config.get("allow_origins", ["*"]),
    allow_methods=["*"],
    allow_headers=_cors_config.get("allow_headers", ["authorization", "x-client-info", "apikey", "content-type"]),
)

app.include_router(emotion_api.router)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error(f"{request.method} {request.url.path} - Configuration error: {exc}")
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"{request.method} {request.url.path} - Invalid request body: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


@app.get("/")
async def root():
    """Root endpoint."""
    logger.info("GET / - Root endpoint called")
    return {"message": "EmpathAI Companion API is running"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    logger.info("GET /health - Health check endpoint called")
    return {"status": "healthy"}


if __name__ == "__main__":
    # Run the server on port 8000
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
