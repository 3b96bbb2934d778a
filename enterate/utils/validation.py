import re
from datetime import datetime
from typing import Optional
from urllib.parse import urlparse
from .constants import AppConstants


class ValidationHelpers:
    @staticmethod
    def validate_email(email: str) -> bool:
        """Validate email format"""
        pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
        return re.match(pattern, email or "") is not None

    @staticmethod
    def validate_url(url: str) -> bool:
        """Validate an http(s) URL"""
        if not url:
            return False
        parsed = urlparse(url)
        return parsed.scheme in ("http", "https") and bool(parsed.netloc)

    @staticmethod
    def validate_image_reference(value: str) -> bool:
        """Image references are either http(s) URLs or uploaded data URLs"""
        if value and value.startswith("data:image/"):
            return ";base64," in value
        return ValidationHelpers.validate_url(value)

    @staticmethod
    def validate_date(value: str) -> bool:
        """Validate a YYYY-MM-DD calendar date"""
        try:
            datetime.strptime(value, "%Y-%m-%d")
            return True
        except (TypeError, ValueError):
            return False

    @staticmethod
    def validate_time(value: str) -> bool:
        """Validate a HH:MM time of day"""
        try:
            datetime.strptime(value, "%H:%M")
            return True
        except (TypeError, ValueError):
            return False

    @staticmethod
    def password_error(password: str, confirm_password: Optional[str] = None) -> Optional[str]:
        """Return the validation message for a password, or None when it is fine"""
        if not password:
            return "La contraseña es obligatoria"
        if len(password) < AppConstants.MIN_PASSWORD_LENGTH:
            return (
                f"La contraseña debe tener al menos "
                f"{AppConstants.MIN_PASSWORD_LENGTH} caracteres"
            )
        if confirm_password is not None and password != confirm_password:
            return "Las contraseñas no coinciden"
        return None

    @staticmethod
    def validate_file_extension(filename: str) -> bool:
        """Validate image file extension"""
        if not filename or "." not in filename:
            return False

        file_extension = filename.lower().rsplit(".", 1)[-1]
        return f".{file_extension}" in AppConstants.ALLOWED_IMAGE_EXTENSIONS
