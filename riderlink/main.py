from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from riderlink.api.router import api_router
from riderlink.core.config import settings
from riderlink.core.exceptions import (
    AppException, app_exception_handler, generic_exception_handler, http_exception_handler,
    validation_exception_handler,
)
from riderlink.core.observability import RequestLoggingMiddleware
from riderlink.core.startup import lifespan

VERSION = "1.0.0"

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Fleet management for motorbike rider fleets: vehicles, GPS, maintenance, fuel and alerts.",
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/health")
async def health():
    return {"status": "ok", "version": VERSION}
