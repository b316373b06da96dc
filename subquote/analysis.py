"""
Revenue analysis and project search over saved projects.
"""

import math
from collections import Counter, defaultdict
from typing import Iterable, Sequence

from .models import ServiceType
from .rates import PRIORITY_LABELS
from .schemas import Project

OTHER_CLIENTS = "Other Clients"


def summary(projects: Sequence[Project], frequent_clients: Sequence[str]) -> dict:
    total_revenue = sum(p.total for p in projects)
    return {
        "total_revenue": total_revenue,
        "total_jobs": len(projects),
        "frequent_clients_count": len(frequent_clients),
        "average_revenue": total_revenue / len(projects) if projects else 0.0,
    }


def revenue_by_month(projects: Iterable[Project]) -> list[dict]:
    """Revenue and job count per calendar month (YYYY-MM), oldest first."""
    totals = defaultdict(float)
    counts = Counter()
    for p in projects:
        month = p.date.strftime("%Y-%m")
        totals[month] += p.total
        counts[month] += 1
    return [
        {"month": month, "total": totals[month], "count": counts[month]}
        for month in sorted(totals)
    ]


def revenue_by_service_type(projects: Iterable[Project]) -> dict:
    totals = defaultdict(float)
    for p in projects:
        totals[p.service_type.value] += p.total
    return dict(totals)


def revenue_by_client(projects: Iterable[Project], frequent_clients: Sequence[str]) -> list[dict]:
    """
    Revenue per frequent client; everyone else pooled under "Other Clients".
    Highest revenue first, "Other Clients" always last.
    """
    frequent = set(frequent_clients)
    totals = defaultdict(float)
    for p in projects:
        key = p.client_name if p.client_name in frequent else OTHER_CLIENTS
        totals[key] += p.total
    rows = [{"name": name, "value": value} for name, value in totals.items()]
    rows.sort(key=lambda r: (r["name"] == OTHER_CLIENTS, -r["value"]))
    return rows


def top_clients(projects: Iterable[Project], frequent_clients: Sequence[str], limit: int = 10) -> list[dict]:
    """
    Frequent clients ranked by revenue. Walk-in clients are not ranked; a
    frequent client with no jobs yet shows zeros and no last job date.
    """
    jobs = defaultdict(list)
    for p in projects:
        jobs[p.client_name].append(p)
    rows = []
    for name in frequent_clients:
        client_jobs = jobs.get(name, [])
        revenue = sum(p.total for p in client_jobs)
        rows.append({
            "name": name,
            "total_jobs": len(client_jobs),
            "total_revenue": revenue,
            "average_revenue": revenue / len(client_jobs) if client_jobs else 0.0,
            "last_job_date": max(p.date for p in client_jobs).isoformat() if client_jobs else None,
        })
    rows.sort(key=lambda r: -r["total_revenue"])
    return rows[:limit]


def jobs_by_urgency(projects: Iterable[Project]) -> dict:
    counts = Counter(PRIORITY_LABELS[p.urgency] for p in projects)
    return {label: counts.get(label, 0) for label in PRIORITY_LABELS.values()}


def revenue_by_urgency(projects: Iterable[Project]) -> list[dict]:
    """Revenue per urgency tier, split by service type."""
    totals = defaultdict(float)
    for p in projects:
        totals[(p.urgency, p.service_type)] += p.total
    return [
        {
            "urgency": label,
            **{service.value: totals[(urgency, service)] for service in ServiceType},
        }
        for urgency, label in PRIORITY_LABELS.items()
    ]


def transcription_variants(projects: Iterable[Project]) -> dict:
    """Job count per transcription variant; subtitle jobs are skipped."""
    counts = Counter(p.variant.value for p in projects if p.service_type == ServiceType.TRANSCRIPTION)
    return dict(counts)


def subtitle_languages(projects: Iterable[Project]) -> dict:
    counts = Counter(p.language.value for p in projects if p.service_type == ServiceType.SUBTITLE)
    return dict(counts)


def average_estimated_days(projects: Sequence[Project]) -> float:
    if not projects:
        return 0.0
    return sum(p.estimated_days for p in projects) / len(projects)


def build_analysis(projects: Sequence[Project], frequent_clients: Sequence[str]) -> dict:
    return {
        "summary": summary(projects, frequent_clients),
        "revenue_by_month": revenue_by_month(projects),
        "revenue_by_service_type": revenue_by_service_type(projects),
        "revenue_by_client": revenue_by_client(projects, frequent_clients),
        "top_clients": top_clients(projects, frequent_clients),
        "jobs_by_urgency": jobs_by_urgency(projects),
        "revenue_by_urgency": revenue_by_urgency(projects),
        "transcription_variants": transcription_variants(projects),
        "subtitle_languages": subtitle_languages(projects),
        "average_estimated_days": average_estimated_days(projects),
    }


# --- Search / paging for the project list ---

def search_projects(projects: Iterable[Project], term: str) -> list[Project]:
    """Case-insensitive match on job title or client name. Blank term keeps all."""
    term = (term or "").strip().lower()
    if not term:
        return list(projects)
    return [
        p for p in projects
        if term in p.job_title.lower() or term in p.client_name.lower()
    ]


def paginate(items: Sequence, page: int = 1, per_page: int = 10) -> dict:
    """1-based pages. Out-of-range pages return an empty slice."""
    total_pages = math.ceil(len(items) / per_page) if per_page > 0 else 0
    page = max(page, 1)
    start = (page - 1) * per_page
    return {
        "items": list(items[start:start + per_page]),
        "page": page,
        "total_pages": total_pages,
        "total_items": len(items),
    }
