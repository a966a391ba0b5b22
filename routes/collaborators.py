"""
Trip collaboration: invitations by e-mail, accepting/declining them, leaving
a trip, and the owner's controls over collaborators and their roles.

Collaborators are never deleted. Leaving or being removed turns the row into
a `former_member`, which keeps the history and blocks re-invitation.
"""
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, joinedload

from config import INVITATION_EXPIRY_DAYS
from models.Profile import Profile
from models.TripCollaborator import TripCollaborator, CollaboratorRole, CollaboratorStatus
from models.TripInvitation import TripInvitation, InvitationStatus
from schemas import InviteRequest, InvitationAction, LeaveRequest, RemoveRequest, RoleUpdateRequest
from database import get_db
from services.auth import get_current_user
from services.fcm_service import notify_trip_invitation
from services.permissions import get_trip_or_404, get_user_role, require_read, EDIT_ROLES
from utils.formatting import as_utc, utcnow
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/collaborate", tags=["Collaboration"])
router2 = APIRouter(prefix="/trips/{trip_id}", tags=["Collaboration"])

_ROLE_ORDER = {CollaboratorRole.OWNER: 0, CollaboratorRole.EDITOR: 1, CollaboratorRole.VIEWER: 2}


def _enum_value(value):
    return value.value if hasattr(value, "value") else value


def _profile_summary(profile: Profile) -> dict:
    if profile is None:
        return None
    return {
        "id": profile.id,
        "email": profile.email,
        "display_name": profile.display_name,
        "avatar_url": profile.avatar_url,
    }


def _collaborator_to_read(collaborator: TripCollaborator) -> dict:
    return {
        "id": collaborator.id,
        "trip_id": collaborator.trip_id,
        "user_id": collaborator.user_id,
        "role": _enum_value(collaborator.role),
        "status": _enum_value(collaborator.status),
        "invited_by": collaborator.invited_by,
        "invited_at": collaborator.invited_at,
        "joined_at": collaborator.joined_at,
        "left_at": collaborator.left_at,
        "removed_at": collaborator.removed_at,
        "removed_by": collaborator.removed_by,
        "user": _profile_summary(collaborator.user),
    }


def _invitation_to_read(invitation: TripInvitation) -> dict:
    result = {
        "id": invitation.id,
        "trip_id": invitation.trip_id,
        "email": invitation.email,
        "role": _enum_value(invitation.role),
        "invited_by": invitation.invited_by,
        "invited_at": invitation.invited_at,
        "expires_at": invitation.expires_at,
        "status": _enum_value(invitation.status),
        "responded_at": invitation.responded_at,
    }

    if invitation.trip:
        result["trip"] = {
            "id": invitation.trip.id,
            "title": invitation.trip.title,
            "city": invitation.trip.city,
            "start_date": invitation.trip.start_date,
            "end_date": invitation.trip.end_date,
        }

    if invitation.inviter:
        result["inviter"] = {
            "id": invitation.inviter.id,
            "email": invitation.inviter.email,
            "display_name": invitation.inviter.display_name,
        }

    return result


def _require_trip_owner(db: Session, trip_id: int, user_id: str, detail: str):
    trip = get_trip_or_404(db, trip_id)
    if get_user_role(db, trip, user_id) != CollaboratorRole.OWNER.value:
        raise HTTPException(status_code=403, detail=detail)
    return trip


def _get_collaborator(db: Session, trip_id: int, user_id: str):
    return db.query(TripCollaborator).filter(
        TripCollaborator.trip_id == trip_id,
        TripCollaborator.user_id == user_id,
    ).first()


def _pending_invitation_for(db: Session, invitation_id: str, email: str) -> TripInvitation:
    invitation = db.query(TripInvitation).filter(
        TripInvitation.id == invitation_id,
        TripInvitation.email == email.lower(),
        TripInvitation.status == InvitationStatus.PENDING,
    ).first()
    if not invitation:
        raise HTTPException(status_code=404, detail="Invitation not found or already responded to")
    return invitation


# ---------- Trip-scoped reads ----------
@router2.get("/collaborators")
def list_collaborators(trip_id: int, include_former: bool = False, db: Session = Depends(get_db),
                       user: Profile = Depends(get_current_user)):
    require_read(db, trip_id, user.id)

    query = (
        db.query(TripCollaborator)
        .options(joinedload(TripCollaborator.user))
        .filter(TripCollaborator.trip_id == trip_id)
    )
    if not include_former:
        query = query.filter(TripCollaborator.status == CollaboratorStatus.ACTIVE)

    collaborators = sorted(
        query.all(),
        key=lambda c: (c.status != CollaboratorStatus.ACTIVE, _ROLE_ORDER.get(c.role, 3), c.id),
    )
    return {"collaborators": [_collaborator_to_read(c) for c in collaborators]}


@router2.get("/role")
def get_my_role(trip_id: int, db: Session = Depends(get_db), user: Profile = Depends(get_current_user)):
    """The caller's role on the trip, or null when they have no access."""
    trip = get_trip_or_404(db, trip_id)
    role = get_user_role(db, trip, user.id)
    return {
        "trip_id": trip_id,
        "role": role,
        "can_edit": role in EDIT_ROLES,
        "is_owner": role == CollaboratorRole.OWNER.value,
    }


# ---------- Invitations ----------
@router.post("/invite", status_code=status.HTTP_201_CREATED)
def invite_collaborator(payload: InviteRequest, db: Session = Depends(get_db),
                        user: Profile = Depends(get_current_user)):
    trip = _require_trip_owner(db, payload.trip_id, user.id, "Only trip owners can send invitations")
    email = payload.email.lower()

    invitee = db.query(Profile).filter(Profile.email == email).first()
    if invitee:
        existing = _get_collaborator(db, trip.id, invitee.id)
        if existing and existing.status == CollaboratorStatus.ACTIVE:
            raise HTTPException(status_code=400, detail="User is already a collaborator on this trip")
        if existing:
            raise HTTPException(status_code=400, detail="User was previously a member of this trip")

    pending = db.query(TripInvitation).filter(
        TripInvitation.trip_id == trip.id,
        TripInvitation.email == email,
        TripInvitation.status == InvitationStatus.PENDING,
    ).first()
    if pending:
        raise HTTPException(status_code=400, detail="An invitation has already been sent to this email")

    now = utcnow()
    invitation = TripInvitation(
        trip_id=trip.id,
        email=email,
        role=CollaboratorRole(payload.role),
        invited_by=user.id,
        invited_at=now,
        expires_at=now + timedelta(days=INVITATION_EXPIRY_DAYS),
        status=InvitationStatus.PENDING,
    )
    db.add(invitation)
    db.commit()
    db.refresh(invitation)
    logger.info("Invitation %s to %s for trip %s", invitation.id, email, trip.id)

    if invitee and invitee.fcm_token:
        notify_trip_invitation(
            invitee.fcm_token,
            inviter_name=user.display_name or user.email,
            trip_title=trip.title,
            invitation_id=invitation.id,
            trip_id=trip.id,
        )

    return {
        "success": True,
        "message": "Invitation sent successfully",
        "invitation": _invitation_to_read(invitation),
    }


@router.get("/invitations")
def list_my_invitations(db: Session = Depends(get_db), user: Profile = Depends(get_current_user)):
    """Pending, unexpired invitations addressed to the caller, newest first."""
    invitations = (
        db.query(TripInvitation)
        .options(joinedload(TripInvitation.trip), joinedload(TripInvitation.inviter))
        .filter(
            TripInvitation.email == user.email.lower(),
            TripInvitation.status == InvitationStatus.PENDING,
        )
        .order_by(TripInvitation.invited_at.desc())
        .all()
    )
    now = utcnow()
    return {"invitations": [_invitation_to_read(i) for i in invitations if as_utc(i.expires_at) > now]}


@router.post("/accept")
def accept_invitation(payload: InvitationAction, db: Session = Depends(get_db),
                      user: Profile = Depends(get_current_user)):
    invitation = _pending_invitation_for(db, payload.invitation_id, user.email)
    now = utcnow()

    if as_utc(invitation.expires_at) < now:
        invitation.status = InvitationStatus.EXPIRED
        invitation.responded_at = now
        db.commit()
        raise HTTPException(status_code=400, detail="Invitation has expired")

    collaborator = _get_collaborator(db, invitation.trip_id, user.id)
    if collaborator and collaborator.status == CollaboratorStatus.ACTIVE:
        raise HTTPException(status_code=400, detail="You are already a collaborator on this trip")

    if collaborator:
        # returning former member
        collaborator.role = invitation.role
        collaborator.status = CollaboratorStatus.ACTIVE
        collaborator.invited_by = invitation.invited_by
        collaborator.invited_at = invitation.invited_at
        collaborator.joined_at = now
        collaborator.left_at = None
        collaborator.removed_at = None
        collaborator.removed_by = None
    else:
        db.add(TripCollaborator(
            trip_id=invitation.trip_id,
            user_id=user.id,
            role=invitation.role,
            status=CollaboratorStatus.ACTIVE,
            invited_by=invitation.invited_by,
            invited_at=invitation.invited_at,
            joined_at=now,
        ))

    invitation.status = InvitationStatus.ACCEPTED
    invitation.responded_at = now
    db.commit()
    logger.info("User %s joined trip %s as %s", user.id, invitation.trip_id, _enum_value(invitation.role))

    return {
        "success": True,
        "message": "Invitation accepted successfully",
        "tripId": invitation.trip_id,
    }


@router.post("/decline")
def decline_invitation(payload: InvitationAction, db: Session = Depends(get_db),
                       user: Profile = Depends(get_current_user)):
    invitation = _pending_invitation_for(db, payload.invitation_id, user.email)
    invitation.status = InvitationStatus.DECLINED
    invitation.responded_at = utcnow()
    db.commit()
    return {"success": True, "message": "Invitation declined"}


@router.delete("/invitations/{invitation_id}")
def cancel_invitation(invitation_id: str, db: Session = Depends(get_db),
                      user: Profile = Depends(get_current_user)):
    invitation = db.query(TripInvitation).filter(TripInvitation.id == invitation_id).first()
    if not invitation or invitation.invited_by != user.id:
        raise HTTPException(status_code=404, detail="Invitation not found")
    if invitation.status != InvitationStatus.PENDING:
        raise HTTPException(status_code=400, detail="Only pending invitations can be cancelled")

    invitation.status = InvitationStatus.CANCELLED
    invitation.responded_at = utcnow()
    db.commit()
    return {"success": True, "message": "Invitation cancelled"}


# ---------- Membership ----------
@router.post("/leave")
def leave_trip(payload: LeaveRequest, db: Session = Depends(get_db), user: Profile = Depends(get_current_user)):
    collaborator = _get_collaborator(db, payload.trip_id, user.id)
    if not collaborator:
        raise HTTPException(status_code=404, detail="You are not a collaborator on this trip")
    if collaborator.role == CollaboratorRole.OWNER:
        raise HTTPException(
            status_code=400,
            detail="Trip owners cannot leave. Please transfer ownership or delete the trip.",
        )
    if collaborator.status == CollaboratorStatus.FORMER_MEMBER:
        raise HTTPException(status_code=400, detail="You have already left this trip")

    collaborator.status = CollaboratorStatus.FORMER_MEMBER
    collaborator.left_at = utcnow()
    db.commit()
    return {"success": True, "message": "You have left the trip successfully"}


@router.post("/remove")
def remove_collaborator(payload: RemoveRequest, db: Session = Depends(get_db),
                        user: Profile = Depends(get_current_user)):
    _require_trip_owner(db, payload.trip_id, user.id, "Only trip owners can remove collaborators")

    target = _get_collaborator(db, payload.trip_id, payload.user_id)
    if not target:
        raise HTTPException(status_code=404, detail="Collaborator not found")
    if target.role == CollaboratorRole.OWNER:
        raise HTTPException(status_code=400, detail="Cannot remove trip owner")
    if target.status == CollaboratorStatus.FORMER_MEMBER:
        raise HTTPException(status_code=400, detail="User is already a former member")

    target.status = CollaboratorStatus.FORMER_MEMBER
    target.removed_at = utcnow()
    target.removed_by = user.id
    db.commit()
    logger.info("User %s removed %s from trip %s", user.id, payload.user_id, payload.trip_id)
    return {"success": True, "message": "Collaborator removed successfully"}


@router.put("/role")
def update_collaborator_role(payload: RoleUpdateRequest, db: Session = Depends(get_db),
                             user: Profile = Depends(get_current_user)):
    _require_trip_owner(db, payload.trip_id, user.id, "Only trip owners can change collaborator roles")

    target = _get_collaborator(db, payload.trip_id, payload.user_id)
    if not target:
        raise HTTPException(status_code=404, detail="Collaborator not found")
    if target.role == CollaboratorRole.OWNER:
        raise HTTPException(status_code=400, detail="Cannot change owner role. Transfer ownership instead.")
    if target.status == CollaboratorStatus.FORMER_MEMBER:
        raise HTTPException(status_code=400, detail="Cannot change role of former member")

    target.role = CollaboratorRole(payload.role)
    db.commit()
    db.refresh(target)
    return {
        "success": True,
        "message": "Collaborator role updated successfully",
        "collaborator": _collaborator_to_read(target),
    }
