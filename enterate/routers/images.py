from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from typing import Dict, Any

from ..context import AppContext
from ..dependencies.permissions import get_app_context, require_user
from ..schemas.user import User
from ..utils.constants import AppConstants
from ..utils.router_helpers import handle_service_errors, unwrap, RouterResponse

router = APIRouter(tags=["images"])


@router.post("/", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
@handle_service_errors
async def upload_image(
    file: UploadFile = File(...),
    context: AppContext = Depends(get_app_context),
    current_user: User = Depends(require_user),
):
    """Store an event image; use the returned ``image_url`` on the event"""
    # One byte past the limit is enough for the size check to reject it
    content = await file.read(AppConstants.MAX_IMAGE_SIZE_MB * 1024 * 1024 + 1)
    image = unwrap(
        context.images.store_image(file.filename, file.content_type, content)
    )
    return RouterResponse.created(
        data={
            "id": image.id,
            "image_url": image.data,
            "filename": image.filename,
            "size": image.size,
        },
        message="Imagen subida",
    )


@router.get("/{image_id}", response_model=Dict[str, Any])
@handle_service_errors
async def get_image(image_id: str, context: AppContext = Depends(get_app_context)):
    image = context.images.get_image(image_id)
    if not image:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")
    return RouterResponse.success(data={"image": image})
