# parkki/routers/cameras.py
"""Camera registry endpoints — list, look up, explicit registration."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from parkki.database import begin_write, get_db
from parkki.schemas.camera import CameraCreate, CameraOut
from parkki.services.event_store import create_camera, get_camera, list_cameras

router = APIRouter()


@router.get("/cameras", response_model=list[CameraOut], summary="List cameras with their last event")
def get_cameras(db: Session = Depends(get_db)):
    return list_cameras(db)


@router.get("/cameras/{camera_id}", response_model=CameraOut)
def get_one_camera(camera_id: str, db: Session = Depends(get_db)):
    camera = get_camera(db, camera_id)
    if not camera:
        raise HTTPException(status_code=404, detail=f"Camera '{camera_id}' not found")
    return camera


@router.post("/cameras", response_model=CameraOut, status_code=201, summary="Register a camera")
def register_camera(body: CameraCreate, db: Session = Depends(get_db)):
    """
    Explicit registration. Unknown cameras are also created automatically
    on their first event, so calling this is optional.
    """
    begin_write(db)
    if get_camera(db, body.id):
        raise HTTPException(status_code=409, detail=f"Camera '{body.id}' already registered")
    return create_camera(db, body.id, name=body.name, status=body.status)
