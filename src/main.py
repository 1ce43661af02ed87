"""
Main FastAPI Application Entry Point
Expense Claim Approval System
"""

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from contextlib import asynccontextmanager
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
import time

from src.config.settings import settings
from src.config.database import engine, Base
from src.database.setup_database import seed_defaults
from src.utils.exceptions import ExpenseClaimError
from src.utils.logger import setup_logger
from src.middleware.auth_middleware import AuthMiddleware
from src.middleware.logging_middleware import LoggingMiddleware

from src.routes import auth, claims, approval, reports, settings as settings_routes

logger = setup_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Create tables and seed the default directory, categories and matrix
    """
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION} ({settings.ENVIRONMENT})")

    try:
        Base.metadata.create_all(bind=engine)
        seed_defaults()
    except SQLAlchemyError:
        logger.exception("Failed to prepare database")
        raise

    if not settings.ENFORCE_DESIGNATED_SIGNERS:
        logger.warning("Designated-signer enforcement is off; any non-admin user may sign")

    logger.info("Ready to accept claims")
    yield
    logger.info(f"Shutting down {settings.APP_NAME}")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Expense claim submission and multi-step approval workflow",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(AuthMiddleware)
app.add_middleware(LoggingMiddleware)


# Exception handlers
@app.exception_handler(ExpenseClaimError)
async def claim_exception_handler(request: Request, exc: ExpenseClaimError):
    """Workflow errors carry their own code and HTTP status"""
    logger.warning(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, **exc.to_dict()}
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Route-level refusals (auth, module access, bad filters)"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.detail, "detail": exc.detail},
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed payloads never reach the workflow"""
    logger.info(f"Validation error on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "success": False,
            "message": "Validation error",
            "errors": jsonable_encoder(exc.errors())
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "message": "Internal server error",
            "detail": str(exc) if settings.DEBUG else "An error occurred"
        }
    )


@app.get("/health", tags=["Health"])
async def health_check():
    """Liveness plus a database round-trip"""
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as e:
        logger.error(f"Health check database failure: {str(e)}")
        database = "unavailable"

    return {
        "status": "healthy" if database == "ok" else "degraded",
        "app_name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "database": database,
        "timestamp": time.time()
    }


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to the {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "identity_header": settings.USER_ID_HEADER,
        "sections": ["/api/auth", "/api/claims", "/api/approvals", "/api/reports", "/api/settings"],
        "docs": "/api/docs",
        "health": "/health"
    }


app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(claims.router, prefix="/api/claims", tags=["Claims"])
app.include_router(approval.router, prefix="/api/approvals", tags=["Approvals"])
app.include_router(reports.router, prefix="/api/reports", tags=["Reports"])
app.include_router(settings_routes.router, prefix="/api/settings", tags=["Settings"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "src.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
