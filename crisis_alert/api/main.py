"""
FastAPI app assembly: middleware and router wiring.
Includes the identity endpoints that span multiple resource modules.
"""
import logging
import os

from fastapi import APIRouter, Depends, FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

# Configure logging
LOG_LEVEL_NAME = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL = getattr(logging, LOG_LEVEL_NAME, logging.INFO)
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)
logger.setLevel(LOG_LEVEL)
logger.info("app_startup: log_level=%s", LOG_LEVEL_NAME)


from crisis_alert import __version__
from crisis_alert.api.alerts import router as alerts_router
from crisis_alert.api.allocations import router as allocations_router
from crisis_alert.api.analytics import router as analytics_router
from crisis_alert.api.auth import router as auth_router
from crisis_alert.api.dashboards import router as dashboards_router
from crisis_alert.api.deps import dev_mode_requested, get_current_user_context
from crisis_alert.api.incidents import router as incidents_router
from crisis_alert.api.notifications import router as notifications_router
from crisis_alert.api.resources import router as resources_router
from crisis_alert.api.users import router as users_router
from crisis_alert.utils.feature_flags import get_feature_flags
from crisis_alert.utils.roles import ROLE_PERMISSIONS, dashboard_route, get_role_permissions

# Storage is created lazily on first request (see crisis_alert.storage.get_storage).

app = FastAPI(
    title="CrisisAlert Incident Reporting Service",
    description="API for citizen incident reporting, triage, resource allocation and alerts.",
    version=__version__,
)

# Avoid implicit trailing-slash redirects for predictable URLs
app.router.redirect_slashes = False

DEFAULT_CORS_ORIGINS = [
    "http://localhost",
    "http://localhost:3000",
    "http://localhost:5000",
    "http://localhost:5173",
]


def _cors_origins() -> list[str]:
    raw = os.getenv("CORS_ORIGINS", "")
    return [o.strip() for o in raw.split(",") if o.strip()] or list(DEFAULT_CORS_ORIGINS)


app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

WRITE_METHODS = ("POST", "PUT", "PATCH", "DELETE")
# Login and registration are how guests stop being guests
GUEST_WRITE_PREFIXES = ("/auth/",)


# Middleware: enforce read-only for unauthenticated requests
@app.middleware("http")
async def enforce_readonly_for_guests(request: Request, call_next):
    if request.method in WRITE_METHODS:
        # In dev mode, allow; the dev identity is resolved by route dependencies
        if not dev_mode_requested():
            path = request.url.path or ""
            if path.startswith(GUEST_WRITE_PREFIXES):
                return await call_next(request)
            h = request.headers
            user_present = (
                h.get("x-auth-request-user")
                or h.get("x-auth-request-email")
                or h.get("x-forwarded-user")
                or h.get("x-forwarded-email")
            )
            if not user_present:
                return JSONResponse(
                    {"detail": "Guest mode is read-only. Sign in to perform changes."},
                    status_code=status.HTTP_401_UNAUTHORIZED,
                )
    return await call_next(request)


router = APIRouter()


@router.get("/user-info")
def get_user_info(user_context=Depends(get_current_user_context)):
    """
    Return authenticated user info.
    - Dev mode (DEV_MODE=true): returns the seeded coordinator.
    - Normal mode: reads headers set by oauth2-proxy and provisions unknown emails as citizens.
    """
    user, current_user = user_context
    return {
        "authenticated": True,
        "user": user.model_dump(mode="json"),
        "dashboard": dashboard_route(user.role),
        "permissions": get_role_permissions(user.role),
        "dev_mode": current_user["dev_mode"],
        "features": dict(get_feature_flags()),
    }


@router.get("/permissions")
def get_permission_matrix():
    """The role permission matrix the dashboards use to show or hide actions."""
    return {role: dict(perms) for role, perms in ROLE_PERMISSIONS.items()}


app.include_router(router)
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(incidents_router)
app.include_router(resources_router)
app.include_router(allocations_router)
app.include_router(alerts_router)
app.include_router(notifications_router)
app.include_router(analytics_router)
app.include_router(dashboards_router)


@app.get("/health")
def health_check():
    return {"status": "ok", "service": "crisis-alert-service"}
