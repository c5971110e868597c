from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ..db import Database
from ..dependencies import get_app_settings, get_database, get_user_service
from ..schemas import BackupOut, ErrorOut, UserCreate, UserOut
from ..services import UserService, backup
from ..settings import Settings

router = APIRouter(prefix="/api", tags=["system"])


# PUBLIC_INTERFACE
@router.post(
    "/users",
    response_model=UserOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create User",
)
def create_user(payload: UserCreate, service: UserService = Depends(get_user_service)) -> UserOut:
    user = service.create(payload.username)
    return UserOut(id=user["id"], username=user["name"])


# PUBLIC_INTERFACE
@router.get(
    "/backup",
    response_model=BackupOut,
    summary="Backup Database",
    description="Write a compacted copy of the database into the configured backup_dir.",
    responses={500: {"model": ErrorOut, "description": "Backup failed"}},
)
def save_backup(
    db: Database = Depends(get_database), settings: Settings = Depends(get_app_settings)
) -> BackupOut:
    return BackupOut(path=str(backup(db, settings.backup_dir)))
