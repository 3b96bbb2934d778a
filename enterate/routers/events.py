from fastapi import APIRouter, Depends, Query, status
from typing import Dict, Any, Optional

from ..context import AppContext
from ..dependencies.permissions import get_app_context, require_user
from ..schemas.event import CommentCreate, EventCreate, EventUpdate, InteractionUpdate
from ..schemas.user import User
from ..utils.router_helpers import (
    handle_service_errors,
    require_read,
    unwrap,
    RouterResponse,
)
from ..utils.constants import EVENT_CATEGORIES

router = APIRouter(tags=["events"])


@router.get("/", response_model=Dict[str, Any])
@handle_service_errors
async def get_events(
    search: Optional[str] = Query(None, description="Text to look for"),
    category: Optional[str] = Query(None, description="Exact category"),
    context: AppContext = Depends(get_app_context),
):
    """List events, newest first"""
    events = require_read(
        context.events.search_events(term=search, category=category),
        "events_read_failed",
    )
    return RouterResponse.success(data={"events": events, "total": len(events)})


@router.post("/", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
@handle_service_errors
async def create_event(
    event_data: EventCreate,
    context: AppContext = Depends(get_app_context),
    current_user: User = Depends(require_user),
):
    """Publish a new event"""
    event = unwrap(context.events.create_event(event_data, current_user))
    return RouterResponse.created(data={"event": event}, message="Evento creado")


@router.get("/categories", response_model=Dict[str, Any])
async def get_categories():
    return RouterResponse.success(data={"categories": EVENT_CATEGORIES})


@router.get("/{event_id}", response_model=Dict[str, Any])
@handle_service_errors
async def get_event(event_id: str, context: AppContext = Depends(get_app_context)):
    event = context.events.get_event(event_id)
    return RouterResponse.success(data={"event": event})


@router.put("/{event_id}", response_model=Dict[str, Any])
@handle_service_errors
async def update_event(
    event_id: str,
    event_data: EventUpdate,
    context: AppContext = Depends(get_app_context),
    current_user: User = Depends(require_user),
):
    """Edit an event (organizer, moderator or admin)"""
    event = unwrap(context.events.update_event(event_id, event_data, current_user))
    return RouterResponse.updated(data={"event": event}, message="Evento actualizado")


@router.delete("/{event_id}", response_model=Dict[str, Any])
@handle_service_errors
async def delete_event(
    event_id: str,
    context: AppContext = Depends(get_app_context),
    current_user: User = Depends(require_user),
):
    """Delete an event with its comments and interactions"""
    unwrap(context.events.delete_event(event_id, current_user))
    return RouterResponse.deleted(message="Evento eliminado")


@router.post(
    "/{event_id}/comments",
    response_model=Dict[str, Any],
    status_code=status.HTTP_201_CREATED,
)
@handle_service_errors
async def add_comment(
    event_id: str,
    comment_data: CommentCreate,
    context: AppContext = Depends(get_app_context),
    current_user: User = Depends(require_user),
):
    comment = unwrap(context.events.add_comment(event_id, comment_data, current_user))
    return RouterResponse.created(data={"comment": comment})


@router.put("/{event_id}/like", response_model=Dict[str, Any])
@handle_service_errors
async def set_like(
    event_id: str,
    interaction: InteractionUpdate,
    context: AppContext = Depends(get_app_context),
    current_user: User = Depends(require_user),
):
    """Like (present=true) or unlike (present=false); repeating is a no-op"""
    counters = unwrap(
        context.events.set_like(event_id, current_user, interaction.present)
    )
    return RouterResponse.updated(data={"counters": counters})


@router.put("/{event_id}/attendance", response_model=Dict[str, Any])
@handle_service_errors
async def set_attendance(
    event_id: str,
    interaction: InteractionUpdate,
    context: AppContext = Depends(get_app_context),
    current_user: User = Depends(require_user),
):
    counters = unwrap(
        context.events.set_attendance(event_id, current_user, interaction.present)
    )
    return RouterResponse.updated(data={"counters": counters})


@router.get("/{event_id}/interactions", response_model=Dict[str, Any])
@handle_service_errors
async def get_user_interactions(
    event_id: str,
    context: AppContext = Depends(get_app_context),
    current_user: User = Depends(require_user),
):
    """Whether the caller likes and attends the event"""
    interactions = context.events.user_interactions(event_id, current_user.id)
    return RouterResponse.success(data={"interactions": interactions})
