from .locations import router as locations_router
from .sms import router as sms_router

_routers = [sms_router, locations_router]

__all__ = ["get_routers"]


def get_routers():
    return _routers
