import logging

from fastapi import FastAPI, Request
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse

from cv_autofill.api.routes.parse import router as parse_router
from cv_autofill.core.config import get_settings
from cv_autofill.core.errors import CVProcessingError

settings = get_settings()
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="CV Autofill Parser",
    description="Deterministic CV parsing service that turns PDF/DOCX/TXT CVs into structured profiles for form autofill",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

app.include_router(parse_router)


@app.exception_handler(CVProcessingError)
async def cv_processing_exception_handler(request: Request, exc: CVProcessingError):
    """Render classified processing failures with both technical and user-facing messages."""
    logger.warning("%s %s failed: %s (%s)", request.method, request.url.path, exc.code.value, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.get("/", tags=["health"])
def root():
    return {"service": "cv-autofill-parser", "status": "running"}


@app.get("/health", tags=["health"])
def health():
    return {"status": "ok"}


def custom_openapi():
    """Generate OpenAPI schema with custom settings."""
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title="CV Autofill Parser API",
        version="0.1.0",
        description="CV parsing API with per-category confidence scores",
        routes=app.routes,
    )
    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi
