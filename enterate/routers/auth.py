from fastapi import APIRouter, Depends, status
from typing import Dict, Any
import logging

from ..context import AppContext
from ..dependencies.permissions import get_app_context, require_user
from ..schemas.user import LoginRequest, RegisterRequest, User
from ..utils.router_helpers import handle_service_errors, unwrap, RouterResponse

router = APIRouter(tags=["authentication"])
logger = logging.getLogger(__name__)


# Auth Endpoints
@router.post("/login", response_model=Dict[str, Any])
@handle_service_errors
async def login_user(
    credentials: LoginRequest, context: AppContext = Depends(get_app_context)
):
    """Sign in; the account is created on first sign-in"""
    session = context.users.login(credentials)
    return RouterResponse.success(data=session.model_dump(), message="Sesión iniciada")


@router.post("/register", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
@handle_service_errors
async def register_user(
    user_data: RegisterRequest, context: AppContext = Depends(get_app_context)
):
    user = context.users.register(user_data)
    logger.info(f"✅ User registered: {user.email}")
    return RouterResponse.created(data={"user": user}, message="Cuenta creada")


@router.post("/logout", response_model=Dict[str, Any])
@handle_service_errors
async def logout_user(context: AppContext = Depends(get_app_context)):
    context.users.logout()
    return RouterResponse.success(message="Sesión cerrada")


@router.get("/me", response_model=Dict[str, Any])
@handle_service_errors
async def get_me(current_user: User = Depends(require_user)):
    return RouterResponse.success(data={"user": current_user})


@router.get("/me/points", response_model=Dict[str, Any])
@handle_service_errors
async def get_my_points(
    context: AppContext = Depends(get_app_context),
    current_user: User = Depends(require_user),
):
    points = context.users.get_user_points(current_user)
    return RouterResponse.success(data={"user_id": current_user.id, "points": points})


@router.post("/me/admin-request", response_model=Dict[str, Any])
@handle_service_errors
async def request_admin_role(
    context: AppContext = Depends(get_app_context),
    current_user: User = Depends(require_user),
):
    """Ask the moderators for the admin role"""
    user = unwrap(context.users.request_admin_role(current_user))
    return RouterResponse.updated(data={"user": user}, message="Solicitud enviada")
