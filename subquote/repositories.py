"""
Persistence collaborators for saved projects and the frequent-client list.

QuoteSession and the routers only talk to the abstract interfaces; the
SQLAlchemy classes are what the app wires in, the in-memory ones back tests
and scripts.
"""

import enum
import logging
from abc import ABC, abstractmethod
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import models
from .errors import NotFoundError, PersistenceError, ValidationError
from .schemas import Project, ProjectCreate, ProjectUpdate

logger = logging.getLogger(__name__)


def _plain(record: ProjectCreate) -> dict:
    """model_dump() with enums flattened to their stored VARCHAR values."""
    return {
        key: value.value if isinstance(value, enum.Enum) else value
        for key, value in record.model_dump().items()
    }


# --- Projects ---

class ProjectRepository(ABC):

    @abstractmethod
    def save(self, record: ProjectCreate) -> Project:
        pass

    @abstractmethod
    def list(self) -> list[Project]:
        """All projects, newest first."""
        pass

    @abstractmethod
    def get(self, project_id: int) -> Project:
        pass

    @abstractmethod
    def delete(self, project_id: int) -> None:
        pass

    @abstractmethod
    def update(self, project_id: int, update: ProjectUpdate) -> Project:
        """Partial update of status / notes."""
        pass


class InMemoryProjectRepository(ProjectRepository):

    def __init__(self):
        self._projects: dict[int, Project] = {}
        self._next_id = 1

    def save(self, record):
        project = Project(id=self._next_id, **record.model_dump())
        self._projects[project.id] = project
        self._next_id += 1
        return project

    def list(self):
        return sorted(self._projects.values(), key=lambda p: (p.date, p.id), reverse=True)

    def get(self, project_id):
        if project_id not in self._projects:
            raise NotFoundError("Project not found")
        return self._projects[project_id]

    def delete(self, project_id):
        if self._projects.pop(project_id, None) is None:
            raise NotFoundError("Project not found")

    def update(self, project_id, update):
        project = self.get(project_id)
        project = project.model_copy(update=update.model_dump(exclude_unset=True))
        self._projects[project_id] = project
        return project


class SqlProjectRepository(ProjectRepository):

    def __init__(self, db: Session):
        self.db = db

    def _row(self, project_id: int) -> models.Project:
        row = self.db.query(models.Project).filter(models.Project.id == project_id).first()
        if not row:
            raise NotFoundError("Project not found")
        return row

    def save(self, record):
        try:
            row = models.Project(**_plain(record))
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning("Project save failed: %s", e)
            raise PersistenceError("Could not save the project, please try again") from e
        logger.info("Saved project %d (%s / %s)", row.id, row.job_title, row.client_name)
        return Project.model_validate(row)

    def list(self):
        try:
            rows = self.db.query(models.Project).order_by(
                models.Project.date.desc(), models.Project.id.desc()
            ).all()
        except SQLAlchemyError as e:
            raise PersistenceError("Could not load projects") from e
        return [Project.model_validate(r) for r in rows]

    def get(self, project_id):
        try:
            return Project.model_validate(self._row(project_id))
        except SQLAlchemyError as e:
            raise PersistenceError("Could not load the project") from e

    def delete(self, project_id):
        try:
            self.db.delete(self._row(project_id))
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError("Could not delete the project") from e
        logger.info("Deleted project %d", project_id)

    def update(self, project_id, update):
        try:
            row = self._row(project_id)
            for field, value in update.model_dump(exclude_unset=True).items():
                setattr(row, field, value)
            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError("Could not update the project") from e
        return Project.model_validate(row)


# --- Frequent clients ---

class FrequentClientRepository(ABC):

    @abstractmethod
    def list(self) -> list[str]:
        """Client names, alphabetical."""
        pass

    @abstractmethod
    def add(self, name: str) -> None:
        """Adding a name that is already listed is a no-op."""
        pass

    @abstractmethod
    def remove(self, name: str) -> None:
        pass


def _client_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Client name is required")
    return name


class InMemoryFrequentClientRepository(FrequentClientRepository):

    def __init__(self, names=None):
        self._names = set(names or [])

    def list(self):
        return sorted(self._names)

    def add(self, name):
        self._names.add(_client_name(name))

    def remove(self, name):
        self._names.discard(_client_name(name))


class SqlFrequentClientRepository(FrequentClientRepository):

    def __init__(self, db: Session):
        self.db = db

    def list(self):
        try:
            rows = self.db.query(models.FrequentClient).order_by(models.FrequentClient.name).all()
        except SQLAlchemyError as e:
            raise PersistenceError("Could not load frequent clients") from e
        return [r.name for r in rows]

    def add(self, name):
        name = _client_name(name)
        try:
            existing = self.db.query(models.FrequentClient).filter(
                models.FrequentClient.name == name
            ).first()
            if existing:
                return
            self.db.add(models.FrequentClient(name=name))
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError("Could not add frequent client") from e
        logger.info("Added frequent client %s", name)

    def remove(self, name):
        name = _client_name(name)
        try:
            self.db.query(models.FrequentClient).filter(
                models.FrequentClient.name == name
            ).delete()
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError("Could not remove frequent client") from e
        logger.info("Removed frequent client %s", name)
