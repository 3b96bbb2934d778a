from .constants import AppConstants, LocalKeys, ResponseMessages, EVENT_CATEGORIES
from .validation import ValidationHelpers

__all__ = [
    "AppConstants",
    "LocalKeys",
    "ResponseMessages",
    "EVENT_CATEGORIES",
    "ValidationHelpers",
]
