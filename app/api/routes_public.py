"""
Public API routes - no authentication required
"""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from app.api.deps import get_event_service
from app.services.event_service import EventService
from app.services.lifecycle import is_closed
from app.services.qr_service import QRService
from app.utils.responses import success_response

router = APIRouter()

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok"}

@router.get("/share/{event_id}")
async def get_shared_event(
    event_id: str,
    events: EventService = Depends(get_event_service)
):
    """Event as shown on the share page; participant emails are never included"""
    results = events.get_results(event_id)
    event = results.event

    return success_response(
        message="Event retrieved successfully",
        data={
            "id": event.id,
            "type": event.type,
            "name": event.name,
            "detail": event.detail,
            "location": event.location,
            "status": event.status,
            "is_closed": is_closed(event.status),
            "is_anonymous_allowed": event.is_anonymous_allowed,
            "can_multiple_vote": event.can_multiple_vote,
            "share_url": event.share_url,
            "tally": results.tally,
        }
    )

@router.get("/share/{event_id}/qr.png")
async def get_share_qr_code(
    event_id: str,
    events: EventService = Depends(get_event_service)
):
    """QR code image for the event's share link"""
    events.get_event(event_id)

    qr_bytes = QRService.generate_share_qr(event_id)

    return Response(
        content=qr_bytes,
        media_type="image/png",
        headers={"Content-Disposition": f"inline; filename=qr_{event_id}.png"}
    )
