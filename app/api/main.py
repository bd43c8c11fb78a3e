"""FastAPI application setup."""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.errors import InvalidConfigurationError, MalformedRecordError
from .routes import router

# Create FastAPI app
app = FastAPI(
    title="Hospice Acquisition Target Engine",
    description="Score, classify, value and compare hospice acquisition targets",
    version="0.1.0",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidConfigurationError)
async def invalid_configuration_handler(request: Request, exc: InvalidConfigurationError):
    return JSONResponse(status_code=400, content={"detail": exc.problems})


@app.exception_handler(MalformedRecordError)
async def malformed_record_handler(request: Request, exc: MalformedRecordError):
    return JSONResponse(status_code=422, content={"detail": str(exc), "ccn": exc.ccn})


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}


# Include API routes
app.include_router(router, prefix="/api")
