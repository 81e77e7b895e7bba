import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from team_planner.config import get_settings
from team_planner.core.exceptions import PlannerError
from team_planner.api.routes import schedules, swaps, notifications, discord
from team_planner.services.dispatcher import NotificationDispatcher
from team_planner.services.notifier import build_notifier

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the external notification consumer; drain it on shutdown."""
    dispatcher = NotificationDispatcher(build_notifier(settings), maxsize=settings.notification_queue_size)
    await dispatcher.start()
    app.state.dispatcher = dispatcher
    logger.info(f"{settings.app_name} started ({settings.environment})")
    try:
        yield
    finally:
        await dispatcher.stop()
        app.state.dispatcher = None


app = FastAPI(
    title=settings.app_name,
    description="API for team schedules, shift swaps and notifications",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PlannerError)
async def planner_error_handler(request: Request, exc: PlannerError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    message = f"Invalid {field}: {first.get('msg')}" if field else "Invalid request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": message},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    content = {"success": False, "message": "Server error"}
    if settings.expose_error_details:
        content["error"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


# Include routers
app.include_router(schedules.router, prefix="/api/schedules", tags=["Schedules"])
app.include_router(swaps.router, prefix="/api/schedules", tags=["Shift Swaps"])
app.include_router(notifications.router, prefix="/api/notifications", tags=["Notifications"])
app.include_router(discord.router, prefix="/api/discord", tags=["Discord"])


@app.get("/")
async def root():
    return {"message": "Team Planner API", "version": "1.0.0"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
