from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..discount_profiles import SqlDiscountProfileStore
from ..errors import PersistenceError, ValidationError
from ..repositories import SqlFrequentClientRepository

router = APIRouter(prefix="/clients", tags=["clients"])


# --- Frequent clients ---

@router.get("/frequent")
def list_frequent_clients(db: Session = Depends(get_db)):
    try:
        return SqlFrequentClientRepository(db).list()
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.post("/frequent")
def add_frequent_client(client: schemas.FrequentClientCreate, db: Session = Depends(get_db)):
    clients = SqlFrequentClientRepository(db)
    try:
        clients.add(client.name)
        return clients.list()
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.delete("/frequent/{name}")
def remove_frequent_client(name: str, db: Session = Depends(get_db)):
    """Removing a frequent client also forgets their discount profile."""
    clients = SqlFrequentClientRepository(db)
    try:
        clients.remove(name)
        SqlDiscountProfileStore(db).remove(name)
        return clients.list()
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))


# --- Discount profiles ---

@router.get("/discounts", response_model=list[schemas.ClientDiscountProfile])
def list_discount_profiles(db: Session = Depends(get_db)):
    try:
        return SqlDiscountProfileStore(db).list_profiles()
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/{name}/discount", response_model=schemas.ClientDiscountProfile)
def get_discount_profile(name: str, db: Session = Depends(get_db)):
    try:
        profile = SqlDiscountProfileStore(db).get(name)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))
    if not profile:
        raise HTTPException(status_code=404, detail="No discount profile for this client")
    return profile


@router.put("/{name}/discount", response_model=schemas.ClientDiscountProfile)
def put_discount_profile(name: str, update: schemas.ClientDiscountUpdate, db: Session = Depends(get_db)):
    store = SqlDiscountProfileStore(db)
    profile = schemas.ClientDiscountProfile(client_name=name, **update.model_dump())
    try:
        store.upsert(profile)
        return store.get(name)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.delete("/{name}/discount")
def delete_discount_profile(name: str, db: Session = Depends(get_db)):
    try:
        SqlDiscountProfileStore(db).remove(name)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return {"ok": True}
