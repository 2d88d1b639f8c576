"""FastAPI application entry point for the Classroom Activities system."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from classroom.config import get_settings
from classroom.errors import DuplicateSubmissionError, RecordValidationError
from classroom.routes import auth as auth_routes
from classroom.routes import student as student_routes
from classroom.routes import teacher as teacher_routes


logger = logging.getLogger("classroom.web")
logging.basicConfig(level=logging.INFO)

settings = get_settings()

app = FastAPI(title="Classroom Activities", debug=settings.DEBUG)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def on_startup() -> None:
    """Log when the application starts."""
    logger.info("Classroom Activities starting up (data dir: %s)", settings.DATA_DIR)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Simple health check endpoint."""
    return {"status": "healthy", "version": "1.0.0"}


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Custom HTTP exception responses."""
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        detail = exc.detail or "Authentication required."
    elif exc.status_code == status.HTTP_404_NOT_FOUND:
        detail = exc.detail or "The requested resource was not found."
    else:
        detail = exc.detail or "An error occurred while processing the request."
    return JSONResponse({"detail": detail}, status_code=exc.status_code)


@app.exception_handler(RecordValidationError)
async def validation_error_handler(request: Request, exc: RecordValidationError):
    return JSONResponse({"detail": str(exc)}, status_code=status.HTTP_400_BAD_REQUEST)


@app.exception_handler(DuplicateSubmissionError)
async def duplicate_submission_handler(request: Request, exc: DuplicateSubmissionError):
    return JSONResponse({"detail": str(exc)}, status_code=status.HTTP_409_CONFLICT)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Catch-all handler for unhandled errors."""
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        {"detail": "Internal server error. Please try again later."},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


app.include_router(auth_routes.router)
app.include_router(teacher_routes.router, prefix="/teacher")
app.include_router(student_routes.router, prefix="/student")
