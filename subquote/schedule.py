"""
Schedule board helpers: due dates, priority and overdue / due-soon checks
for saved projects.
"""

import math
from datetime import datetime, timedelta
from typing import Iterable, Optional

from .config import settings
from .models import ProjectStatus
from .rates import PRIORITY_LABELS
from .schemas import Project


def due_date(project: Project) -> datetime:
    """Custom due date if one was set, otherwise save date + estimated days."""
    if project.custom_due_date:
        return project.custom_due_date
    return project.date + timedelta(days=project.estimated_days)


def days_until_due(project: Project, today: datetime) -> int:
    """Whole days left, rounded up. Negative once overdue."""
    seconds = (due_date(project) - today).total_seconds()
    return math.ceil(seconds / 86400)


def is_due_soon(project: Project, today: datetime, threshold: Optional[int] = None) -> bool:
    if project.status == ProjectStatus.COMPLETED:
        return False
    if threshold is None:
        threshold = settings.DUE_SOON_DAYS
    return days_until_due(project, today) <= threshold


def is_overdue(project: Project, today: datetime) -> bool:
    return project.status != ProjectStatus.COMPLETED and due_date(project) < today


def priority(project: Project) -> str:
    return PRIORITY_LABELS[project.urgency]


def project_stats(projects: Iterable[Project], today: datetime) -> dict:
    projects = list(projects)
    return {
        "total": len(projects),
        "pending": sum(1 for p in projects if p.status == ProjectStatus.PENDING),
        "in_progress": sum(1 for p in projects if p.status == ProjectStatus.IN_PROGRESS),
        "completed": sum(1 for p in projects if p.status == ProjectStatus.COMPLETED),
        "overdue": sum(1 for p in projects if is_overdue(p, today)),
    }


def schedule_entry(project: Project, today: datetime) -> dict:
    return {
        "id": project.id,
        "job_title": project.job_title,
        "client_name": project.client_name,
        "service_type": project.service_type.value,
        "priority": priority(project),
        "status": project.status.value,
        "notes": project.notes or "",
        "date": project.date.isoformat(),
        "due_date": due_date(project).isoformat(),
        "days_until_due": days_until_due(project, today),
        "due_soon": is_due_soon(project, today),
        "overdue": is_overdue(project, today),
    }


def build_schedule(projects: Iterable[Project], today: Optional[datetime] = None) -> dict:
    """Schedule board payload: one row per project plus the stat cards."""
    today = today or datetime.utcnow()
    projects = list(projects)
    return {
        "projects": [schedule_entry(p, today) for p in projects],
        "stats": project_stats(projects, today),
        "due_soon": [p.id for p in projects if is_due_soon(p, today)],
    }
