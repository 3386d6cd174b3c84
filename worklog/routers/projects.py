"""Project router - API endpoints for project management."""
from fastapi import APIRouter, Depends, HTTPException, status

from worklog.database import get_database
from worklog.errors import WorklogError
from worklog.models.project import Project, ProjectCreate, ProjectUpdate
from worklog.routers.auth import get_current_user_id
from worklog.services.project_service import ProjectService
from worklog.utils.datetime_format import get_clock


router = APIRouter(prefix="/projects", tags=["projects"])


@router.post("", response_model=Project, status_code=status.HTTP_201_CREATED)
async def create_project(
    project: ProjectCreate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
    clock=Depends(get_clock),
):
    """
    Create a new project.

    - Billable projects require an hourly rate; non-billable ones forbid it
    """
    service = ProjectService(db, clock=clock)
    return await service.create_project(user_id=user_id, project_create=project)


@router.get("", response_model=list[Project])
async def list_projects(
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """List the current user's active projects."""
    service = ProjectService(db)
    return await service.list_projects(user_id=user_id)


@router.get("/{project_id}", response_model=Project)
async def get_project(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Get an active project by ID.

    Raises:
        HTTPException: If project not found (404)
    """
    service = ProjectService(db)

    try:
        return await service.get_project(user_id=user_id, project_id=project_id)
    except WorklogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)


@router.patch("/{project_id}", response_model=Project)
async def update_project(
    project_id: str,
    project_update: ProjectUpdate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
    clock=Depends(get_clock),
):
    """
    Update a project.

    Raises:
        HTTPException: If project not found (404) or the billable flag and
            hourly rate disagree (400)
    """
    service = ProjectService(db, clock=clock)

    try:
        return await service.update_project(
            user_id=user_id,
            project_id=project_id,
            project_update=project_update,
        )
    except WorklogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)


@router.delete("/{project_id}")
async def delete_project(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
    clock=Depends(get_clock),
):
    """
    Soft delete a project and remove its time entries.

    Raises:
        HTTPException: If project not found (404), or the entries could not
            be removed after deactivation (500)
    """
    service = ProjectService(db, clock=clock)

    try:
        return await service.delete_project(user_id=user_id, project_id=project_id)
    except WorklogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
