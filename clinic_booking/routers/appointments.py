from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from dateutil import parser as dtparser

from .. import schemas
from ..dependencies import get_appointment_service, require_editor
from ..models import User
from ..services.appointments import AppointmentService

router = APIRouter(prefix="/appointments", tags=["appointments"])


@router.get("")
def list_appointments(
    date: Optional[str] = Query(None, description="YYYY-MM-DD"),
    svc: AppointmentService = Depends(get_appointment_service),
):
    if date:
        try:
            date = dtparser.parse(date).date().isoformat()
        except (ValueError, OverflowError):
            raise HTTPException(status_code=400, detail="Invalid date format. Use YYYY-MM-DD.")
    return svc.list(date)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_appointment(
    req: schemas.AppointmentIn,
    user: User = Depends(require_editor),
    svc: AppointmentService = Depends(get_appointment_service),
):
    return svc.create(req.payload(), user.name, notify=req.send_notification)


@router.post("/special", status_code=status.HTTP_201_CREATED)
def create_special_appointment(
    req: schemas.AppointmentIn,
    user: User = Depends(require_editor),
    svc: AppointmentService = Depends(get_appointment_service),
):
    return svc.create_special(req.payload(), user.name, notify=req.send_notification)


@router.put("/special/{appointment_id}")
def update_special_appointment(
    appointment_id: int,
    req: schemas.AppointmentIn,
    user: User = Depends(require_editor),
    svc: AppointmentService = Depends(get_appointment_service),
):
    return svc.update_special(appointment_id, req.payload(), user.name, notify=req.send_notification)


@router.put("/{appointment_id}")
def update_appointment(
    appointment_id: int,
    req: schemas.AppointmentIn,
    user: User = Depends(require_editor),
    svc: AppointmentService = Depends(get_appointment_service),
):
    return svc.update(appointment_id, req.payload(), user.name, notify=req.send_notification)


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_appointment(
    appointment_id: int,
    send_notification: bool = Query(False, alias="sendNotification"),
    user: User = Depends(require_editor),
    svc: AppointmentService = Depends(get_appointment_service),
):
    svc.delete(appointment_id, user.name, notify=send_notification)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
