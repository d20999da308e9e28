from loggedin.web.routers.auth import router as auth_router
from loggedin.web.routers.profile import router as profile_router
from loggedin.web.routers.settings import router as settings_router

__all__ = [
    "auth_router",
    "profile_router",
    "settings_router",
]
