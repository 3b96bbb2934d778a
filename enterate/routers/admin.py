from fastapi import APIRouter, Depends
from typing import Dict, Any

from ..context import AppContext
from ..dependencies.permissions import get_app_context, require_event_manager
from ..schemas.user import AdminReview, RoleUpdate, User
from ..utils.router_helpers import handle_service_errors, unwrap, RouterResponse

router = APIRouter(tags=["admin"])


@router.get("/requests", response_model=Dict[str, Any])
@handle_service_errors
async def get_admin_requests(
    context: AppContext = Depends(get_app_context),
    reviewer: User = Depends(require_event_manager),
):
    """Users waiting for an admin-role decision"""
    requests = context.users.list_admin_requests(reviewer)
    return RouterResponse.success(data={"requests": requests})


@router.put("/requests/{user_id}", response_model=Dict[str, Any])
@handle_service_errors
async def review_admin_request(
    user_id: str,
    review: AdminReview,
    context: AppContext = Depends(get_app_context),
    reviewer: User = Depends(require_event_manager),
):
    """Approve or reject a request; the requester gets a (simulated) e-mail"""
    outcome = await context.users.review_admin_request(
        user_id, review.approved, reviewer
    )
    user = unwrap(outcome["result"])

    decision = "aprobado" if review.approved else "rechazado"
    if outcome["email_sent"]:
        message = f"Usuario {decision} y email enviado exitosamente"
    else:
        message = f"Usuario {decision} pero falló el envío del email"
    return RouterResponse.updated(
        data={"user": user, "email_sent": outcome["email_sent"]}, message=message
    )


@router.put("/users/{user_id}/role", response_model=Dict[str, Any])
@handle_service_errors
async def update_user_role(
    user_id: str,
    role_data: RoleUpdate,
    context: AppContext = Depends(get_app_context),
    reviewer: User = Depends(require_event_manager),
):
    user = unwrap(context.users.update_role(user_id, role_data.role, reviewer))
    return RouterResponse.updated(data={"user": user})


@router.get("/emails", response_model=Dict[str, Any])
@handle_service_errors
async def get_sent_emails(
    context: AppContext = Depends(get_app_context),
    reviewer: User = Depends(require_event_manager),
):
    """Log of simulated e-mails, newest first"""
    emails = context.notifications.sent_emails()
    return RouterResponse.success(data={"emails": emails, "total": len(emails)})
