"""Run the API with uvicorn: python -m gaia"""
import uvicorn

from gaia.core.config import settings


def main():
    uvicorn.run(
        "gaia.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
