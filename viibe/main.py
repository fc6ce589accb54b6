# viibe/main.py

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from viibe import __version__
from viibe.config import get_settings
from viibe.logging_config import configure_logging
from viibe.routers import comedians_router, history_router, lines_router, tags_router

settings = get_settings()
configure_logging(json_format=settings.LOG_JSON, level=settings.LOG_LEVEL)

app = FastAPI(
    title="Viibe API",
    description="Tag safety screening and caption post-processing",
    version=__version__,
)

if settings.cors_origin_list:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )

app.include_router(tags_router)
app.include_router(lines_router)
app.include_router(history_router)
app.include_router(comedians_router)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------

@app.get("/health")
def health() -> dict:
    return {"status": "ok", "service": "viibe-api", "version": __version__}


@app.get("/")
def root() -> dict:
    return {
        "service": "Viibe API",
        "version": __version__,
        "endpoints": {
            "parse": "POST /v1/tags/parse",
            "normalize": "POST /v1/tags/normalize",
            "sanitize": "POST /v1/tags/sanitize",
            "validate": "GET /v1/tags/validate?input=...",
            "enforce": "POST /v1/lines/enforce",
            "enforce_fallback": "POST /v1/lines/enforce-fallback",
            "strip_soft_echo": "POST /v1/lines/strip-soft-echo",
            "check_duplicates": "POST /v1/history/check",
            "add_history": "POST /v1/history",
            "clear_history": "DELETE /v1/history",
            "comedian_assignment": "GET /v1/comedians/assignment/{option_number}",
        },
    }
