import os
import json
import logging
import logging.config
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, FileResponse, JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.httpsredirect import HTTPSRedirectMiddleware
import uvicorn

# ------------------------------------------------------------
# 1. CONFIG & LOGGING
# ------------------------------------------------------------
from app.core.config import settings
from app.core.upi import get_link_builder

LOG_LEVEL = "INFO" if settings.ENVIRONMENT == "production" else "DEBUG"

logging_config = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
        },
    },
    "loggers": {
        "uvicorn": {"handlers": ["console"], "level": LOG_LEVEL},
        "uvicorn.error": {"handlers": ["console"], "level": LOG_LEVEL},
        "uvicorn.access": {"handlers": ["console"], "level": LOG_LEVEL},
        "coffee": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
    },
}

logging.config.dictConfig(logging_config)
logger = logging.getLogger("coffee")


class CustomProxyHeadersMiddleware(BaseHTTPMiddleware):
    """
    Honour X-Forwarded-For / X-Forwarded-Proto set by the hosting proxy.
    """
    async def dispatch(self, request, call_next):
        x_forwarded_for = request.headers.get("x-forwarded-for")
        if x_forwarded_for:
            # Take the first IP in the list
            request.scope["client"] = (x_forwarded_for.split(",")[0].strip(), 0)

        x_forwarded_proto = request.headers.get("x-forwarded-proto")
        if x_forwarded_proto:
            request.scope["scheme"] = x_forwarded_proto

        return await call_next(request)


# ------------------------------------------------------------
# 2. FASTAPI APP
# ------------------------------------------------------------
app = FastAPI(
    title=f"{settings.PROJECT_NAME} API",
    description="Build UPI deep links for a voluntary coffee payment.",
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

# ------------------------------------------------------------
# 3. CORS
# ------------------------------------------------------------
origins = [
    "http://127.0.0.1:8000",
    "http://localhost:8000",
    *settings.CORS_ORIGINS,
]

def install_middleware(target: FastAPI, environment: str):
    """
    The last middleware added runs first, so the proxy headers are applied
    before the HTTPS redirect looks at the scheme.
    """
    if environment == "production":
        target.add_middleware(HTTPSRedirectMiddleware)

    target.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    target.add_middleware(CustomProxyHeadersMiddleware)


install_middleware(app, settings.ENVIRONMENT)

# ------------------------------------------------------------
# 4. ROUTERS (API ROUTES)
# ------------------------------------------------------------
from app.routers import upi_router

app.include_router(upi_router.router, prefix="/api", tags=["UPI"])

# ------------------------------------------------------------
# 5. SETUP PATHS
# ------------------------------------------------------------
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
FRONTEND_DIR = os.path.join(BASE_DIR, "frontend")

if not os.path.exists(FRONTEND_DIR):
    logger.error(f"❌ FRONTEND_DIR not found: {FRONTEND_DIR}")
else:
    logger.info(f"✅ FRONTEND_DIR found: {FRONTEND_DIR}")

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "X-Content-Type-Options": "nosniff",
}


# ------------------------------------------------------------
# 6. STATIC FILE HANDLERS
# ------------------------------------------------------------
def serve_static(subdir: str, file_path: str, media_type: str) -> FileResponse:
    """Serve a file from FRONTEND_DIR/<subdir> with an explicit MIME type."""
    root = os.path.abspath(os.path.join(FRONTEND_DIR, subdir))
    full_path = os.path.abspath(os.path.join(root, file_path))

    # Security check
    if not full_path.startswith(root + os.sep):
        raise HTTPException(status_code=403, detail="Access denied")

    if not os.path.isfile(full_path):
        raise HTTPException(status_code=404, detail=f"File not found: {file_path}")

    logger.debug(f"🟢 Serving {subdir}: {file_path}")

    return FileResponse(
        full_path,
        media_type=media_type,
        headers={
            "X-Content-Type-Options": "nosniff",
            "Cache-Control": "no-cache" if settings.DEBUG else "public, max-age=86400"
        }
    )


@app.get("/js/{file_path:path}", include_in_schema=False)
async def serve_js(file_path: str):
    return serve_static("js", file_path, "application/javascript")


@app.get("/css/{file_path:path}", include_in_schema=False)
async def serve_css(file_path: str):
    return serve_static("css", file_path, "text/css")


# ------------------------------------------------------------
# 7. SPECIFIC ROUTES
# ------------------------------------------------------------
@app.get("/health", tags=["System"])
async def health_check():
    return {"status": "healthy"}


# ------------------------------------------------------------
# 8. HTML ROUTES
# ------------------------------------------------------------
def page_config_script() -> str:
    builder = get_link_builder()
    config = {
        "title": settings.PROJECT_NAME,
        "apiBase": "/api/upi",
        "payeeAddress": builder.config.payee_address,
        "payeeName": builder.config.payee_name,
        "defaultNote": settings.DEFAULT_NOTE,
        "presetAmounts": settings.PRESET_AMOUNTS,
    }
    # keep "</script>" inside values from closing the tag
    payload = json.dumps(config).replace("</", "<\\/")
    return f"""
    <script>
        window.COFFEE_CONFIG = {payload};
    </script>
    """


@app.get("/", include_in_schema=False)
async def serve_index():
    index_path = os.path.join(FRONTEND_DIR, "index.html")
    if not os.path.exists(index_path):
        raise HTTPException(status_code=404, detail="Index page not found")

    with open(index_path, "r", encoding="utf-8") as f:
        html_content = f.read()

    html_content = html_content.replace("</head>", page_config_script() + "\n</head>", 1)

    return HTMLResponse(html_content, headers=NO_CACHE_HEADERS)


# ------------------------------------------------------------
# 9. GLOBAL EXCEPTION HANDLER
# ------------------------------------------------------------
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "Something went wrong. Please try again.",
            "request_id": request.headers.get("X-Request-ID"),
        },
    )


# ------------------------------------------------------------
# 10. STARTUP EVENTS
# ------------------------------------------------------------
@app.on_event("startup")
async def startup_event():
    logger.info(f"🚀 {settings.PROJECT_NAME} started | Env: {settings.ENVIRONMENT} | Debug: {settings.DEBUG}")
    logger.info(f"☕ Paying to: {settings.PAYEE_NAME} ({settings.UPI_VPA})")


# ------------------------------------------------------------
# 11. REQUEST LOGGING MIDDLEWARE
# ------------------------------------------------------------
@app.middleware("http")
async def log_requests(request: Request, call_next):
    client = request.client.host if request.client else "-"
    logger.info(f"➡️ {client} {request.method} {request.url.path}")
    try:
        response = await call_next(request)
    except Exception as e:
        logger.exception(f"💥 Exception during {request.method} {request.url.path}: {e}")
        raise
    logger.info(f"⬅️ {request.method} {request.url.path} → {response.status_code}")
    return response


# ------------------------------------------------------------
# 12. RUN LOCALLY
# ------------------------------------------------------------
if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
        access_log=True
    )
