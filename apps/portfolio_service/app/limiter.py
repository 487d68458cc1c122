from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
import logging
from .auth import token_subject
from .config import get_settings

logger = logging.getLogger(__name__)

def get_user_key(request: Request) -> str:
    """Rate limit per authenticated user, per client address otherwise"""
    auth_header = request.headers.get("authorization") or ""
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() == "bearer" and token:
        user_id = token_subject(token.strip())
        if user_id:
            return f"user:{user_id}"
    return get_remote_address(request)

limiter = Limiter(key_func=get_user_key, storage_uri=get_settings().RATE_LIMIT_STORAGE_URI)

def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.info(f"Rate limit hit for {get_user_key(request)} on {request.url.path}: {exc.detail}")
    response = JSONResponse(
        status_code=429,
        content={"error": "Too many requests", "detail": f"Rate limit exceeded: {exc.detail}"},
    )
    limit = getattr(exc, "limit", None)
    if limit is not None:
        response.headers["Retry-After"] = str(limit.limit.get_expiry())
    return response
