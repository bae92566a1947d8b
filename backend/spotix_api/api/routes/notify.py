from fastapi import APIRouter, Depends

from spotix_api.api.deps import get_mailjet
from spotix_api.api.health import health_payload
from spotix_api.core.errors import ApiError
from spotix_api.schemas.mail import TeamMemberAddedBody, require
from spotix_api.services.mailer import MailjetClient

router = APIRouter()

@router.post("/team-member-added")
async def team_member_added(payload: TeamMemberAddedBody, mailjet: MailjetClient = Depends(get_mailjet)):
    require(
        payload, "collaborationId", "eventId", "bookerId", "userRole", "eventName", "bookerName", "username", "email",
        message="Missing required fields for team member notification",
    )
    try:
        await mailjet.send_team_member_added(
            email=payload.email,
            recipient_name=payload.recipientName or payload.username,
            collaboration_id=payload.collaborationId,
            event_id=payload.eventId,
            booker_id=payload.bookerId,
            user_role=payload.userRole,
            event_name=payload.eventName,
            booker_name=payload.bookerName,
            username=payload.username,
        )
    except ApiError as exc:
        raise ApiError("Failed to send team member notification", status_code=exc.status_code, details=exc.message, success=False) from exc
    return {"success": True, "message": "Team member notification sent successfully"}

@router.get("/health")
def notify_health():
    return health_payload("Team Notification API")
