"""
Quote Session API: the price calculator form, kept server-side between calls.

POST   /api/session/start                     : New blank session (optionally with initial fields)
GET    /api/session/{id}                      : Current fields + price
PATCH  /api/session/{id}                      : Change fields, get recomputed price
POST   /api/session/{id}/select-client        : Pick a client, prefill remembered discounts
POST   /api/session/{id}/frequent-clients     : Remember the current client
DELETE /api/session/{id}/frequent-clients/{n} : Forget a client (and its discount profile)
POST   /api/session/{id}/save                 : Validate + store as a project, reset the form
POST   /api/session/{id}/reset                : Clear the form
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from .. import models
from ..database import get_db
from ..discount_profiles import SqlDiscountProfileStore
from ..errors import PersistenceError, ValidationError
from ..quote_session import QuoteSession
from ..repositories import SqlFrequentClientRepository, SqlProjectRepository

router = APIRouter(prefix="/session", tags=["quote-session"])


# --- Request schemas ---

class FieldsRequest(BaseModel):
    fields: dict = {}


class SelectClientRequest(BaseModel):
    client_name: str


# --- Helpers ---

def _quote_session(db: Session) -> QuoteSession:
    return QuoteSession(
        projects=SqlProjectRepository(db),
        profiles=SqlDiscountProfileStore(db),
        clients=SqlFrequentClientRepository(db),
    )


def _load(session_id: str, db: Session):
    row = db.query(models.QuoteSession).filter(models.QuoteSession.id == session_id).first()
    if not row:
        raise HTTPException(status_code=404, detail="Session not found")
    session = _quote_session(db)
    session.restore(row.params_json or {})
    return row, session


def _store(row: models.QuoteSession, session: QuoteSession, db: Session) -> dict:
    row.params_json = session.snapshot()
    db.commit()
    return {"session_id": row.id, **session.to_dict()}


def _http_error(e: Exception) -> HTTPException:
    if isinstance(e, ValidationError):
        return HTTPException(status_code=400, detail=str(e))
    return HTTPException(status_code=503, detail=str(e))


# --- Endpoints ---

@router.post("/start")
def start_session(request: Optional[FieldsRequest] = None, db: Session = Depends(get_db)):
    session = _quote_session(db)
    if request and request.fields:
        try:
            session.update(**request.fields)
        except ValidationError as e:
            raise _http_error(e)

    row = models.QuoteSession(id=str(uuid.uuid4()), params_json=session.snapshot())
    db.add(row)
    return _store(row, session, db)


@router.get("/{session_id}")
def get_session(session_id: str, db: Session = Depends(get_db)):
    row, session = _load(session_id, db)
    return {"session_id": row.id, **session.to_dict()}


@router.patch("/{session_id}")
def update_session(session_id: str, request: FieldsRequest, db: Session = Depends(get_db)):
    row, session = _load(session_id, db)
    try:
        session.update(**request.fields)
    except ValidationError as e:
        raise _http_error(e)
    return _store(row, session, db)


@router.post("/{session_id}/select-client")
def select_client(session_id: str, request: SelectClientRequest, db: Session = Depends(get_db)):
    row, session = _load(session_id, db)
    try:
        session.select_client(request.client_name)
    except (ValidationError, PersistenceError) as e:
        raise _http_error(e)
    return _store(row, session, db)


@router.post("/{session_id}/frequent-clients")
def add_frequent_client(session_id: str, db: Session = Depends(get_db)):
    row, session = _load(session_id, db)
    try:
        clients = session.add_frequent_client()
    except (ValidationError, PersistenceError) as e:
        raise _http_error(e)
    return {**_store(row, session, db), "frequent_clients": clients}


@router.delete("/{session_id}/frequent-clients/{client_name}")
def remove_frequent_client(session_id: str, client_name: str, db: Session = Depends(get_db)):
    row, session = _load(session_id, db)
    try:
        clients = session.remove_frequent_client(client_name)
    except (ValidationError, PersistenceError) as e:
        raise _http_error(e)
    return {**_store(row, session, db), "frequent_clients": clients}


@router.post("/{session_id}/save")
def save_session(session_id: str, db: Session = Depends(get_db)):
    """
    Store the quote as a project. On validation or storage failure the
    session keeps its fields so the user can fix them and retry.
    """
    row, session = _load(session_id, db)
    try:
        project = session.save()
    except (ValidationError, PersistenceError) as e:
        raise _http_error(e)
    return {**_store(row, session, db), "project": project.model_dump(mode="json")}


@router.post("/{session_id}/reset")
def reset_session(session_id: str, db: Session = Depends(get_db)):
    row, session = _load(session_id, db)
    session.reset()
    return _store(row, session, db)
