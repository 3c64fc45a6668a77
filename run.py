import uvicorn

from config.settings import settings

if __name__ == "__main__":
    # Local entry point; the PORT variable is set by the hosting platform
    uvicorn.run("main:app", host="0.0.0.0", port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
