"""
Client discount profile store tests: same contract for the in-memory and SQL stores.
"""

import pytest

from subquote import models
from subquote.discount_profiles import InMemoryDiscountProfileStore, SqlDiscountProfileStore
from subquote.errors import ValidationError
from subquote.schemas import ClientDiscountProfile


@pytest.fixture(params=["memory", "sql"])
def store(request, db):
    if request.param == "memory":
        return InMemoryDiscountProfileStore()
    return SqlDiscountProfileStore(db)


def _profile(name="Acme Studio", difficulty=20.0, custom=10.0, has_difficulty=True):
    return ClientDiscountProfile(
        client_name=name,
        difficulty_percent=difficulty,
        custom_discount_percent=custom,
        has_difficulty_level=has_difficulty,
    )


def test_unknown_client_has_no_profile(store):
    assert store.get("Nobody") is None


def test_upsert_then_get(store):
    store.upsert(_profile())
    assert store.get("Acme Studio") == _profile()


def test_last_write_wins(store):
    store.upsert(_profile(custom=10))
    store.upsert(_profile(custom=25, has_difficulty=False))
    profile = store.get("Acme Studio")
    assert profile.custom_discount_percent == 25
    assert not profile.has_difficulty_level
    assert len(store.list_profiles()) == 1


def test_remove(store):
    store.upsert(_profile())
    store.upsert(_profile(name="Beta Media"))
    store.remove("Acme Studio")
    assert store.get("Acme Studio") is None
    assert [p.client_name for p in store.list_profiles()] == ["Beta Media"]


def test_remove_missing_is_noop(store):
    store.remove("Nobody")
    assert store.list_profiles() == []


def test_blank_name_rejected(store):
    with pytest.raises(ValidationError):
        store.get("  ")
    with pytest.raises(ValidationError):
        store.upsert(_profile(name=""))


def test_names_are_trimmed(store):
    store.upsert(_profile(name="  Acme Studio "))
    assert store.get("Acme Studio").client_name == "Acme Studio"


def test_sql_store_survives_new_session(db):
    """Profiles are durable: a fresh store on the same database sees them."""
    SqlDiscountProfileStore(db).upsert(_profile())
    db.expire_all()
    row = db.query(models.ClientDiscountProfile).filter_by(client_name="Acme Studio").one()
    assert row.custom_discount_percent == 10
    assert SqlDiscountProfileStore(db).get("Acme Studio") == _profile()
