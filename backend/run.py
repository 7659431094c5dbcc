# run.py
import uvicorn
from app.core.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "main:app",                # points to main.py's app
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,     # auto-reload in dev
        log_level="debug" if settings.DEBUG else "info",
        access_log=True
    )
