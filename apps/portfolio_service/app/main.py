from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
import os
import uuid
import time
import logging
from logging.config import dictConfig
from .config import get_settings, LogConfig
from .database import create_tables, get_engine
from .limiter import limiter, rate_limit_exceeded_handler
from .schemas import HealthResponse
from .routers.ai import router as ai_router
from .routers.auth import router as auth_router
from .routers.education import router as education_router
from .routers.experience import router as experience_router
from .routers.pages import router as pages_router
from .routers.portfolio import router as portfolio_router
from .routers.profile import router as profile_router
from .routers.projects import router as projects_router
from .routers.sections import router as sections_router
from .routers.settings import router as settings_router
from .routers.skills import router as skills_router
from .routers.social_links import router as social_links_router
from .routers.theme import router as theme_router

settings = get_settings()

# Setup logging
dictConfig(LogConfig(settings.LOG_LEVEL))
logger = logging.getLogger("portfolio_service")

app = FastAPI(
    title="Portfolio Service",
    description="API for building, theming and publishing personal portfolios",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Request ID middleware for tracking
@app.middleware("http")
async def add_request_id_and_log(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    logger.info(f"{request.method} {request.url.path} (ID: {request_id}) - "
                f"Status: {response.status_code} - Time: {process_time:.3f}s")

    response.headers["X-Request-ID"] = request_id
    return response

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
    )

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )

app.include_router(auth_router)
app.include_router(profile_router)
app.include_router(settings_router)
app.include_router(experience_router)
app.include_router(education_router)
app.include_router(projects_router)
app.include_router(skills_router)
app.include_router(social_links_router)
app.include_router(sections_router)
app.include_router(theme_router)
app.include_router(portfolio_router)
app.include_router(ai_router)
app.include_router(pages_router)

@app.on_event("startup")
async def startup():
    logger.info("Starting up Portfolio Service")
    create_tables()
    if not settings.OPENAI_API_KEY:
        logger.warning("OPENAI_API_KEY is not set. AI features will not work.")

@app.get("/health", response_model=HealthResponse)
def health():
    try:
        with get_engine().connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check database error: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy", "service": "portfolio_service", "details": {"database": "unreachable"}},
        )
    return {"status": "ok", "service": "portfolio_service"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
