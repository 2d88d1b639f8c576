"""Run the FastAPI development server."""
from __future__ import annotations

import uvicorn

from classroom.config import get_settings


def main() -> None:
    """Launch uvicorn with settings-aware defaults."""
    settings = get_settings()
    uvicorn.run(
        "classroom.app:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info",
    )


if __name__ == "__main__":
    main()
