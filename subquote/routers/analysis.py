from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..analysis import build_analysis
from ..database import get_db
from ..errors import PersistenceError
from ..repositories import SqlFrequentClientRepository, SqlProjectRepository

router = APIRouter(prefix="/analysis", tags=["analysis"])


@router.get("/summary")
def get_analysis(db: Session = Depends(get_db)):
    try:
        projects = SqlProjectRepository(db).list()
        clients = SqlFrequentClientRepository(db).list()
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return build_analysis(projects, clients)
