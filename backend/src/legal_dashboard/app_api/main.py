"""Legal dashboard API application.

Run locally with ``python -m legal_dashboard.app_api.main`` or
``uvicorn legal_dashboard.app_api.main:app --reload``.
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()

from fastapi import Depends, FastAPI, Request  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402
from starlette.exceptions import HTTPException as StarletteHTTPException  # noqa: E402

from legal_dashboard.shared.auth import User, get_current_user  # noqa: E402
from legal_dashboard.shared.config import get_settings  # noqa: E402
from legal_dashboard.shared.errors import ErrorCode, build_error_body  # noqa: E402

from .admin.routes import router as admin_router  # noqa: E402
from .agent.routes import router as agent_router  # noqa: E402
from .clients.routes import router as clients_router  # noqa: E402
from .documents.routes import router as documents_router  # noqa: E402
from .file_numbers.routes import router as file_numbers_router  # noqa: E402
from .packages.routes import router as packages_router  # noqa: E402
from .workflows.routes import router as workflows_router  # noqa: E402

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Legal Dashboard API",
    description="Clients, file numbers, packages, workflows and document analysis",
    version="1.0.0",
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=build_error_body(exc.status_code, exc.detail),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "code": ErrorCode.INTERNAL_ERROR.value},
    )


@app.api_route("/api/health", methods=["GET", "POST"], tags=["health"])
async def health():
    return {"status": "ok"}


@app.get("/api/protected", tags=["auth"])
async def protected(current_user: User = Depends(get_current_user)):
    """Echo the authenticated user; used by the frontend to check a session."""
    return {"message": "This is a protected route", "user": current_user.to_dict()}


app.include_router(clients_router, prefix="/api")
app.include_router(packages_router, prefix="/api")
app.include_router(file_numbers_router, prefix="/api")
app.include_router(documents_router, prefix="/api")
app.include_router(workflows_router, prefix="/api")
app.include_router(agent_router, prefix="/api")
app.include_router(admin_router, prefix="/api")

if not settings.agent_configured:
    logger.warning("BEDROCK_AGENT_ID / BEDROCK_AGENT_ALIAS_ID not set - AI analysis and chat are disabled")
if not settings.extracted_text_bucket:
    logger.warning("S3_BUCKET_EXTRACTED_TEXT not set - document analysis will fail")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "legal_dashboard.app_api.main:app",
        host="0.0.0.0",
        port=int(os.environ.get("PORT", "5000")),
        reload=settings.is_development,
    )
