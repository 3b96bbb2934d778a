class ResponseMessages:
    """Standard API response messages"""

    # Success messages
    SUCCESS = "Success"
    CREATED = "Created successfully"
    UPDATED = "Updated successfully"
    DELETED = "Deleted successfully"

    # Storage failures, shown to the user so the client can revert
    STORAGE_UNAVAILABLE = "No se pudo guardar el cambio. Inténtalo de nuevo."


class LocalKeys:
    """Keys of the on-device key-value store"""

    USERS = "enterate-users"
    EVENTS = "enterate-events"
    CURRENT_USER = "enterate-current-user"
    SENT_EMAILS = "enterate-sent-emails"
    SESSION_ID = "enterate-session-id"
    IMAGE_REGISTRY = "enterate-image-registry"
    IMAGE_PREFIX = "enterate-image-"

    @classmethod
    def image(cls, image_id: str) -> str:
        return f"{cls.IMAGE_PREFIX}{image_id}"


# Application Constants
class AppConstants:
    # Validation Limits
    MAX_TITLE_LENGTH = 100
    MAX_DESCRIPTION_LENGTH = 2000
    MAX_LOCATION_LENGTH = 200
    MAX_COMMENT_LENGTH = 1000
    MIN_PASSWORD_LENGTH = 6

    # File Upload
    MAX_IMAGE_SIZE_MB = 5
    ALLOWED_IMAGE_EXTENSIONS = [".jpg", ".jpeg", ".png", ".gif", ".webp"]

    # Defaults
    DEFAULT_ORGANIZER_NAME = "Anónimo"
    DEFAULT_EMAIL_DELAY_SECONDS = 2.0


EVENT_CATEGORIES = ["Música", "Gastronomía", "Turismo", "Cultura", "Deportes", "Arte"]
