"""
Participant routes for submitting and withdrawing availability
"""

from dataclasses import asdict

from fastapi import APIRouter, BackgroundTasks, Depends

from app.api.deps import get_availability_service, get_notifier
from app.schemas.participant import AvailabilitySubmission, AvailabilityWithdrawal
from app.services.availability_service import AvailabilityService
from app.services.notification_service import NotificationService
from app.utils.responses import success_response
from app.utils.security import enforce_rate_limit

router = APIRouter(dependencies=[Depends(enforce_rate_limit)])

@router.post("/share/{event_id}/availability")
async def submit_availability(
    event_id: str,
    submission: AvailabilitySubmission,
    background_tasks: BackgroundTasks,
    availability: AvailabilityService = Depends(get_availability_service),
    notifier: NotificationService = Depends(get_notifier)
):
    """Submit availability; a reused email answers with status "duplicate" until overwrite is set"""
    result = availability.submit_availability(event_id, submission)
    participant = result.participant

    if result.is_duplicate:
        return success_response(
            message="Email already exists",
            data={
                "participant_id": participant.id,
                "name": participant.participant_name,
                "email": participant.participant_email,
            },
            status=result.status
        )

    # Email goes out after the response; failures are only logged
    if result.confirmation:
        background_tasks.add_task(notifier.send_vote_confirmation, **asdict(result.confirmation))

    return success_response(
        message="Availability submitted successfully",
        data={"participant_id": participant.id},
        status=result.status
    )

@router.delete("/share/{event_id}/availability")
async def withdraw_availability(
    event_id: str,
    withdrawal: AvailabilityWithdrawal,
    availability: AvailabilityService = Depends(get_availability_service)
):
    """Remove a participant and their availability from an event"""
    availability.withdraw_availability(event_id, withdrawal.email)

    return success_response(message="Participant availability deleted successfully")
