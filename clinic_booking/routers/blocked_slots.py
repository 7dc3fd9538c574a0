from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import JSONResponse

from .. import schemas
from ..dependencies import get_blocked_slot_service, require_editor
from ..models import User
from ..services.blocked_slots import BlockedSlotService

router = APIRouter(prefix="/blocked-slots", tags=["blocked-slots"])


@router.get("")
def list_blocked_slots(svc: BlockedSlotService = Depends(get_blocked_slot_service)):
    return svc.list()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_blocked_slot(
    req: schemas.BlockedSlotIn,
    user: User = Depends(require_editor),
    svc: BlockedSlotService = Depends(get_blocked_slot_service),
):
    return svc.create(req.payload(), user.name, notify=req.send_notification)


@router.post("/check")
def check_blocked_slot(
    req: schemas.BlockedSlotIn,
    svc: BlockedSlotService = Depends(get_blocked_slot_service),
):
    """
    Appointments the given period would overlap. Informational only: saving
    the slot is never refused because of them.
    """
    overlapping = svc.overlapping_appointments(req.payload())
    return {"count": len(overlapping), "appointments": overlapping}


@router.post("/register-holidays", response_model=schemas.HolidayImportResponse)
def register_holidays(
    user: User = Depends(require_editor),
    svc: BlockedSlotService = Depends(get_blocked_slot_service),
):
    added = svc.register_holidays(user.name)
    if added:
        body = schemas.HolidayImportResponse(message=f"Registered {added} holidays.", added_count=added)
        return JSONResponse(status_code=status.HTTP_201_CREATED, content=body.model_dump(by_alias=True))
    return schemas.HolidayImportResponse(message="No new holidays to register.", added_count=0)


@router.put("/{slot_id}")
def update_blocked_slot(
    slot_id: int,
    req: schemas.BlockedSlotIn,
    user: User = Depends(require_editor),
    svc: BlockedSlotService = Depends(get_blocked_slot_service),
):
    return svc.update(slot_id, req.payload(), user.name, notify=req.send_notification)


@router.delete("/{slot_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_blocked_slot(
    slot_id: int,
    send_notification: bool = Query(True, alias="sendNotification"),
    user: User = Depends(require_editor),
    svc: BlockedSlotService = Depends(get_blocked_slot_service),
):
    svc.delete(slot_id, user.name, notify=send_notification)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
