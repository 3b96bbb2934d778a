import base64
import logging
import time
import uuid

from ..schemas.common import OperationResult
from ..schemas.image import StoredImage
from ..utils.constants import AppConstants
from ..utils.validation import ValidationHelpers
from .local_store import LocalStore

logger = logging.getLogger(__name__)


class ImageServiceError(Exception):
    """Base exception for image service errors"""

    pass


class ImageValidationError(ImageServiceError):
    """Uploaded file is not an acceptable image"""

    pass


class ImageService:
    """Keeps uploaded event images on the device as base64 data URLs"""

    def __init__(self, local_store: LocalStore):
        self.local_store = local_store

    def validate_image(self, filename: str, content_type: str, content: bytes):
        if not content_type or not content_type.startswith("image/"):
            raise ImageValidationError("Por favor selecciona un archivo de imagen válido")

        if filename and "." in filename and not ValidationHelpers.validate_file_extension(filename):
            raise ImageValidationError("Formato de imagen no soportado")

        max_bytes = AppConstants.MAX_IMAGE_SIZE_MB * 1024 * 1024
        if len(content) > max_bytes:
            raise ImageValidationError(
                f"La imagen debe ser menor a {AppConstants.MAX_IMAGE_SIZE_MB}MB"
            )

    def store_image(
        self, filename: str, content_type: str, content: bytes
    ) -> OperationResult[StoredImage]:
        """Validate and store an upload; ``data`` is usable directly as an image_url"""
        self.validate_image(filename, content_type, content)

        encoded = base64.b64encode(content).decode("ascii")
        image = StoredImage(
            id=f"img_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}",
            filename=filename or "image",
            data=f"data:{content_type};base64,{encoded}",
            size=len(content),
            type=content_type,
        )

        result = self.local_store.save_image(image)
        if result.ok:
            logger.info(f"🖼️ Stored image {image.id} ({image.size} bytes)")
        return result

    def get_image(self, image_id: str):
        return self.local_store.get_image(image_id)
