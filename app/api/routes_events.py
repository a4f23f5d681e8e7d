"""
Organizer API routes - requires the X-API-Key header
"""

from dataclasses import asdict

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from fastapi.responses import Response

from app.api.deps import get_event_service, get_notifier
from app.core.exceptions import NotFoundError
from app.schemas.event import EventCreate, EventStatusUpdate
from app.services.aggregation import booked_slots
from app.services.calendar_service import calendar_links, generate_event_ics
from app.services.event_service import EventService
from app.services.export_service import ExportService
from app.services.notification_service import NotificationService
from app.utils.responses import success_response
from app.utils.security import verify_api_key

router = APIRouter(dependencies=[Depends(verify_api_key)])

@router.post("/events")
async def create_event(
    event_data: EventCreate,
    events: EventService = Depends(get_event_service)
):
    """Create a new event with its dates and time slots"""
    event = events.create_event(event_data)

    return success_response(
        message="Event created successfully",
        data={"event_id": event.id, "share_url": event.share_url},
        status_code=201
    )

@router.get("/events")
async def list_events(
    creator_id: str = Query(...),
    include_deleted: bool = Query(False),
    events: EventService = Depends(get_event_service)
):
    """List the events created by a user"""
    summaries = events.list_events_by_creator(creator_id, include_deleted=include_deleted)

    return success_response(
        message="Events retrieved successfully",
        data=summaries
    )

@router.get("/events/{event_id}")
async def get_event_details(
    event_id: str,
    include_deleted: bool = Query(False),
    events: EventService = Depends(get_event_service)
):
    """Full event with participants and the current tally"""
    results = events.get_results(event_id, include_deleted=include_deleted)

    return success_response(
        message="Event details retrieved",
        data={
            **results.event.model_dump(),
            "tally": results.tally,
            "most_voted_slot": results.final_slot,
        }
    )

@router.get("/events/{event_id}/stats")
async def get_event_stats(
    event_id: str,
    events: EventService = Depends(get_event_service)
):
    """Tally, winning slot, booked 1:1 slots and add-to-calendar links"""
    results = events.get_results(event_id)
    final_slot = results.final_slot

    return success_response(
        message="Event statistics retrieved",
        data={
            "event_id": results.event.id,
            "status": results.event.status,
            "tally": results.tally,
            "most_voted_slot": final_slot,
            "booked_slots": booked_slots(results.event, results.tally),
            "calendar_links": calendar_links(results.event, final_slot) if final_slot else None,
        }
    )

@router.patch("/events/{event_id}/status")
async def update_event_status(
    event_id: str,
    status_update: EventStatusUpdate,
    events: EventService = Depends(get_event_service)
):
    """Move an event to another status"""
    event = events.update_status(event_id, status_update.status)

    return success_response(
        message="Event status updated successfully",
        data={"id": event.id, "status": event.status}
    )

@router.post("/events/{event_id}/complete")
async def complete_event(
    event_id: str,
    background_tasks: BackgroundTasks,
    events: EventService = Depends(get_event_service),
    notifier: NotificationService = Depends(get_notifier)
):
    """End the poll and notify participants of the final time"""
    result = events.complete_event(event_id)

    for notice in result.notices:
        background_tasks.add_task(notifier.send_event_completion_notification, **asdict(notice))

    return success_response(
        message="Poll has been ended successfully",
        data={
            "id": result.event.id,
            "status": result.event.status,
            "final_slot": result.final_slot,
            "notified": len(result.notices),
        }
    )

@router.delete("/events/{event_id}")
async def delete_event(
    event_id: str,
    events: EventService = Depends(get_event_service)
):
    """Soft delete an event"""
    events.delete_event(event_id)

    return success_response(
        message="Event marked as deleted successfully",
        data={"deleted_event_id": event_id}
    )

@router.get("/events/{event_id}/calendar.ics")
async def download_calendar_file(
    event_id: str,
    events: EventService = Depends(get_event_service)
):
    """Calendar file for the winning slot"""
    results = events.get_results(event_id)
    if results.final_slot is None:
        raise NotFoundError("Final time slot")

    return Response(
        content=generate_event_ics(results.event, results.final_slot),
        media_type="text/calendar",
        headers={"Content-Disposition": f"attachment; filename={event_id}.ics"}
    )

@router.get("/events/{event_id}/export.xlsx")
async def export_results(
    event_id: str,
    events: EventService = Depends(get_event_service)
):
    """Export the current tally to Excel"""
    results = events.get_results(event_id)

    return Response(
        content=ExportService.export_results(results.event, results.tally),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename=results_{event_id}.xlsx"}
    )

@router.get("/users/{uuid}")
async def get_user(
    uuid: str,
    events: EventService = Depends(get_event_service)
):
    """Registered user lookup"""
    user = events.get_user(uuid)

    return success_response(
        message="User retrieved successfully",
        data=user
    )
