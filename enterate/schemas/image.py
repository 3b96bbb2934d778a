from pydantic import BaseModel, Field
from datetime import datetime


class ImageRegistryEntry(BaseModel):
    id: str
    filename: str
    uploaded_at: datetime = Field(default_factory=datetime.utcnow)


class StoredImage(ImageRegistryEntry):
    """Uploaded image kept as a base64 data URL on the local device"""

    data: str
    size: int
    type: str
