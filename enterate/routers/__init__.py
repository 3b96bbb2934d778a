# Import all router modules to make them available
from . import events
from . import auth
from . import admin
from . import images
from . import system

__all__ = [
    "events",
    "auth",
    "admin",
    "images",
    "system",
]
