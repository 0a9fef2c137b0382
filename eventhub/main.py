from fastapi import FastAPI, Request, APIRouter, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from slowapi.errors import RateLimitExceeded

from eventhub.api.routes import auth as auth_router, events as events_router, vendors as vendors_router, health as health_router
from eventhub.db.session import init_repository
from eventhub.core.config import settings
from eventhub.core.exceptions import EventHubError
from eventhub.core.logging import logger

app = FastAPI(title="EventHub")

# Data lives in this process only and is lost on restart
init_repository(app)

# The auth routes own the limiter; register it so slowapi can find it
app.state.limiter = auth_router.limiter

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(EventHubError)
async def eventhub_error_handler(request: Request, exc: EventHubError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    problems = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc)
        problems.append(f"{field}: {error.get('msg')}" if field else error.get("msg"))
    message = "; ".join(problems) or "Invalid request"
    logger.debug(f"Validation failed on {request.method} {request.url.path}: {message}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    logger.warning(f"Rate limit exceeded for {request.client.host if request.client else 'unknown'} on {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"message": f"Rate limit exceeded: {exc.detail}"},
    )


@app.exception_handler(Exception)
async def internal_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"message": "Server error"})


api_router = APIRouter(prefix="/api")
api_router.include_router(auth_router.router)
api_router.include_router(events_router.router)
api_router.include_router(vendors_router.router)
api_router.include_router(health_router.router)

app.include_router(api_router)


@app.get("/")
async def root():
    return {"message": "Event Management System API - In-Memory Store"}
