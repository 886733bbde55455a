"""Member and member-invite API endpoints."""

import logging
from datetime import datetime
from typing import List, Optional
from urllib.parse import quote
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.models.member_invite import InviteStatus
from app.models.user import User
from app.services.auth.dependencies import get_current_user
from app.services.errors import ServiceError
from app.services.invite_issuer import InviteIssuer
from app.services.invite_state_machine import InviteStateMachine
from app.services.member_service import member_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/members", tags=["members"])


# =============================================================================
# Schemas
# =============================================================================


class CreateInviteRequest(BaseModel):
    email: EmailStr
    message: Optional[str] = Field(None, max_length=2000)


class BulkInviteRequest(BaseModel):
    email: EmailStr
    website_ids: List[UUID] = Field(..., min_length=1)


class AcceptInviteRequest(BaseModel):
    token: str = Field(..., min_length=1)


class RejectInviteRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)


class UpdateMemberRequest(BaseModel):
    is_active: Optional[bool] = None


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class InviteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    website_id: UUID
    email: str
    token: str
    status: InviteStatus
    invited_by: Optional[UUID] = None
    member_id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    expires_at: datetime
    accepted_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    revoked_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    inviter: Optional[UserSummary] = None


class MemberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    website_id: UUID
    is_active: bool
    joined_at: Optional[datetime] = None
    invited_at: Optional[datetime] = None
    invited_by: Optional[UUID] = None
    created_at: Optional[datetime] = None
    user: Optional[UserSummary] = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class InvitePage(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    data: List[InviteResponse]
    pagination: Pagination


class MemberPage(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    data: List[MemberResponse]
    pagination: Pagination


class AcceptInviteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    member: MemberResponse
    message: str


class MessageResponse(BaseModel):
    message: str


# =============================================================================
# Invites
# =============================================================================


@router.post(
    "/invite/websites/{website_id}",
    response_model=InviteResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_invite(
    website_id: UUID,
    payload: CreateInviteRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Invite an email address to a website. The caller is recorded as inviter."""
    issuer = InviteIssuer(db)
    return issuer.create_invite(
        website_id, payload.email, invited_by=user.id, message=payload.message
    )


@router.post(
    "/invite/bulk",
    response_model=List[InviteResponse],
    status_code=status.HTTP_201_CREATED,
)
async def bulk_create_invites(
    payload: BulkInviteRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Invite one email to several websites; returns only the invites created."""
    issuer = InviteIssuer(db)
    return issuer.bulk_create_invites(payload.email, payload.website_ids, invited_by=user.id)


@router.get("/invites/website/{website_id}", response_model=InvitePage)
async def list_invites(
    website_id: UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status_filter: Optional[str] = Query(None, alias="status"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    invite_status = None
    if status_filter:
        try:
            invite_status = InviteStatus(status_filter.upper())
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid invite status")

    return member_service.get_invites(db, website_id, page, limit, invite_status)


@router.get("/invite/accept/{token}")
async def accept_invite_via_link(token: str, db: Session = Depends(get_db)):
    """
    Accept link from the invite email.

    Always redirects to the dashboard; failures are reported in the
    ``inviteError`` query parameter instead of an error body.
    """
    frontend_url = settings.frontend_url.rstrip("/")
    try:
        InviteStateMachine(db).accept_invite(token)
    except ServiceError as e:
        logger.info("Invite link acceptance failed: %s", e.message)
        return RedirectResponse(
            url=f"{frontend_url}/dashboard?inviteError={quote(e.message)}",
            status_code=status.HTTP_303_SEE_OTHER,
        )

    return RedirectResponse(
        url=f"{frontend_url}/dashboard?inviteAccepted=true",
        status_code=status.HTTP_303_SEE_OTHER,
    )


@router.get("/invite/{token}", response_model=InviteResponse)
async def get_invite_by_token(token: str, db: Session = Depends(get_db)):
    """Public lookup used by the accept-invite page."""
    return InviteStateMachine(db).get_invite_by_token(token)


@router.post("/invite/accept", response_model=AcceptInviteResponse)
async def accept_invite(payload: AcceptInviteRequest, db: Session = Depends(get_db)):
    return InviteStateMachine(db).accept_invite(payload.token)


@router.post("/invite/{token}/reject", response_model=MessageResponse)
async def reject_invite(
    token: str,
    payload: Optional[RejectInviteRequest] = None,
    db: Session = Depends(get_db),
):
    reason = payload.reason if payload else None
    return InviteStateMachine(db).reject_invite(token, reason)


@router.delete("/invite/{invite_id}/revoke", response_model=MessageResponse)
async def revoke_invite(
    invite_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return InviteStateMachine(db).revoke_invite(invite_id)


@router.post("/invite/{invite_id}/resend", response_model=InviteResponse)
async def resend_invite(
    invite_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return InviteStateMachine(db).resend_invite(invite_id)


# =============================================================================
# Members
# =============================================================================


@router.get("/website/{website_id}", response_model=MemberPage)
async def list_members(
    website_id: UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return member_service.get_members(db, website_id, page, limit)


@router.get("/count/website/{website_id}")
async def count_members(
    website_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return {"count": member_service.count_members(db, website_id)}


@router.get("/{member_id}", response_model=MemberResponse)
async def get_member(
    member_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return member_service.get_member(db, member_id)


@router.patch("/{member_id}", response_model=MemberResponse)
async def update_member(
    member_id: UUID,
    payload: UpdateMemberRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return member_service.update_member(db, member_id, is_active=payload.is_active)


@router.delete("/{member_id}", response_model=MessageResponse)
async def remove_member(
    member_id: UUID,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Deactivate a member. The membership row is kept."""
    return member_service.remove_member(db, member_id)
