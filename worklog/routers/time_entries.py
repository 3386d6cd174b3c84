"""Time entry endpoints."""
from fastapi import APIRouter, Depends, HTTPException, status

from worklog.database import get_database
from worklog.errors import WorklogError
from worklog.models.time_entry import TimeEntry, TimeEntryCreate, TimeEntryUpdate
from worklog.routers.auth import get_current_user_id
from worklog.services.time_entry_service import TimeEntryService
from worklog.utils.datetime_format import get_clock


router = APIRouter(prefix="/time-entries", tags=["time-entries"])


@router.post("", response_model=TimeEntry, status_code=status.HTTP_201_CREATED)
async def create_entry(
    entry_create: TimeEntryCreate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
    clock=Depends(get_clock),
):
    """
    Create a time entry.

    - Times use DD-MM-YYYY H:MM AM|PM at +05:30
    - End must be after start and at most 5 minutes in the future
    - At most 2 minutes of overlap with any other entry
    - Duration is always calculated
    """
    service = TimeEntryService(db, clock=clock)
    try:
        return await service.create_entry(user_id=user_id, entry_create=entry_create)
    except WorklogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)


@router.get("/project/{project_id}", response_model=list[TimeEntry])
async def list_project_entries(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    List a project's time entries, most recent first.

    - Project must be active and owned by the user
    """
    service = TimeEntryService(db)
    try:
        return await service.list_entries_for_project(user_id=user_id, project_id=project_id)
    except WorklogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)


@router.get("/{entry_id}", response_model=TimeEntry)
async def get_entry(
    entry_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """Get a specific time entry by ID."""
    service = TimeEntryService(db)
    try:
        return await service.get_entry(user_id=user_id, entry_id=entry_id)
    except WorklogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)


@router.patch("/{entry_id}", response_model=TimeEntry)
async def update_entry(
    entry_id: str,
    entry_update: TimeEntryUpdate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
    clock=Depends(get_clock),
):
    """
    Update a time entry.

    - Omitted times keep their stored values
    - Same range and overlap rules as creation
    """
    service = TimeEntryService(db, clock=clock)
    try:
        return await service.update_entry(
            user_id=user_id,
            entry_id=entry_id,
            entry_update=entry_update,
        )
    except WorklogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)


@router.delete("/{entry_id}")
async def delete_entry(
    entry_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Delete a time entry.

    - Hard delete (permanent)
    """
    service = TimeEntryService(db)
    try:
        return await service.delete_entry(user_id=user_id, entry_id=entry_id)
    except WorklogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
