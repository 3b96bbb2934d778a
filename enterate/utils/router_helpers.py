from fastapi import HTTPException, status
from typing import Callable, Any, Optional
from functools import wraps
import logging

from ..schemas.common import OperationResult, StorageUnavailableError
from ..services.event_service import (
    EventServiceError,
    EventNotFoundError,
    PermissionDeniedError,
    BusinessRuleViolationError,
)
from ..services.user_service import (
    UserServiceError,
    UserNotFoundError,
    DuplicateEmailError,
    AuthenticationRequiredError,
)
from ..services.image_service import ImageServiceError
from .constants import ResponseMessages

logger = logging.getLogger(__name__)

NOT_FOUND_REASONS = {"event_not_found", "user_not_found"}


def handle_service_errors(func: Callable) -> Callable:
    """Decorator to standardize service error handling in routers"""

    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        # Permission/Access Errors -> 403 Forbidden
        except PermissionDeniedError as e:
            logger.warning(f"Permission denied: {str(e)}")
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))

        except (EventNotFoundError, UserNotFoundError) as e:
            logger.warning(f"Resource not found: {str(e)}")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

        except AuthenticationRequiredError as e:
            logger.warning(f"Authentication failed: {str(e)}")
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))

        # Storage failures -> 503 so the client reverts its optimistic update
        except StorageUnavailableError as e:
            logger.error(f"Storage failure: {e.reason}")
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail={"message": ResponseMessages.STORAGE_UNAVAILABLE, "reason": e.reason},
            )

        # Business Rule Violations -> 400 Bad Request
        except (BusinessRuleViolationError, DuplicateEmailError) as e:
            logger.warning(f"Business rule violation: {str(e)}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

        # General Service Errors -> 400 Bad Request
        except (EventServiceError, UserServiceError, ImageServiceError) as e:
            logger.warning(f"Service error: {str(e)}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

        # Validation Errors -> 400 Bad Request
        except ValueError as e:
            logger.warning(f"Validation error: {str(e)}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

        # Unexpected errors -> 500 Internal Server Error
        except Exception as e:
            logger.error(
                f"Unexpected error in {func.__name__}: {str(e)}", exc_info=True
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="An unexpected error occurred",
            )

    return wrapper


def unwrap(result: OperationResult) -> Any:
    """Data of a successful result; failures become the matching HTTP error"""
    if result.ok:
        return result.data
    if result.reason in NOT_FOUND_REASONS:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.reason)
    raise StorageUnavailableError(result.reason)


def require_read(data: Optional[Any], reason: str) -> Any:
    """Reads hand back None on failure; turn that into a storage error"""
    if data is None:
        raise StorageUnavailableError(reason)
    return data


class RouterResponse:
    """Helper class for creating standardized API responses"""

    @staticmethod
    def success(data: Any = None, message: str = ResponseMessages.SUCCESS) -> dict:
        """Create success response"""
        response = {"success": True, "message": message}
        if data is not None:
            response["data"] = data
        return response

    @staticmethod
    def created(data: Any, message: str = ResponseMessages.CREATED) -> dict:
        """Create resource creation response"""
        return {"success": True, "message": message, "data": data}

    @staticmethod
    def updated(data: Any = None, message: str = ResponseMessages.UPDATED) -> dict:
        """Create resource update response"""
        response = {"success": True, "message": message}
        if data is not None:
            response["data"] = data
        return response

    @staticmethod
    def deleted(message: str = ResponseMessages.DELETED) -> dict:
        """Create resource deletion response"""
        return {"success": True, "message": message}
