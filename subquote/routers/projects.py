from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import schemas
from ..analysis import paginate, search_projects
from ..config import settings
from ..database import get_db
from ..errors import NotFoundError, PersistenceError
from ..repositories import SqlProjectRepository
from ..schedule import build_schedule

router = APIRouter(prefix="/projects", tags=["projects"])


def get_projects(db: Session = Depends(get_db)) -> SqlProjectRepository:
    return SqlProjectRepository(db)


def _load_all(projects: SqlProjectRepository) -> list:
    try:
        return projects.list()
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get("", response_model=schemas.ProjectPage)
@router.get("/", response_model=schemas.ProjectPage, include_in_schema=False)
def list_projects(
    search: str = "",
    page: int = 1,
    projects: SqlProjectRepository = Depends(get_projects),
):
    """Newest first, filtered by job title / client name, 10 per page."""
    matches = search_projects(_load_all(projects), search)
    return paginate(matches, page, settings.PAGE_SIZE)


@router.get("/schedule")
def get_schedule(projects: SqlProjectRepository = Depends(get_projects)):
    return build_schedule(_load_all(projects), datetime.utcnow())


@router.get("/{project_id}", response_model=schemas.Project)
def get_project(project_id: int, projects: SqlProjectRepository = Depends(get_projects)):
    try:
        return projects.get(project_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.patch("/{project_id}", response_model=schemas.Project)
def update_project(
    project_id: int,
    update: schemas.ProjectUpdate,
    projects: SqlProjectRepository = Depends(get_projects),
):
    """Partial update of status and/or notes."""
    try:
        return projects.update(project_id, update)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.delete("/{project_id}")
def delete_project(project_id: int, projects: SqlProjectRepository = Depends(get_projects)):
    try:
        projects.delete(project_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return {"ok": True}
