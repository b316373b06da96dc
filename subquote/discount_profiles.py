"""
Client discount profile store: remembers each client's usual difficulty
surcharge and custom discount so the next quote can be prefilled.

Keyed by client name, last write wins. The quote engine never reads
profiles; QuoteSession copies them into the form as defaults.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import models
from .errors import PersistenceError, ValidationError
from .schemas import ClientDiscountProfile

logger = logging.getLogger(__name__)


def _require_name(client_name: str) -> str:
    name = (client_name or "").strip()
    if not name:
        raise ValidationError("Client name is required")
    return name


class ClientDiscountProfileStore(ABC):
    """Key/value persistence of ClientDiscountProfile by client name."""

    @abstractmethod
    def get(self, client_name: str) -> Optional[ClientDiscountProfile]:
        pass

    @abstractmethod
    def upsert(self, profile: ClientDiscountProfile) -> None:
        pass

    @abstractmethod
    def remove(self, client_name: str) -> None:
        pass

    @abstractmethod
    def list_profiles(self) -> list[ClientDiscountProfile]:
        pass


class InMemoryDiscountProfileStore(ClientDiscountProfileStore):
    """Dict-backed store. Lives as long as the object does."""

    def __init__(self):
        self._profiles: dict[str, ClientDiscountProfile] = {}

    def get(self, client_name):
        return self._profiles.get(_require_name(client_name))

    def upsert(self, profile):
        name = _require_name(profile.client_name)
        self._profiles[name] = profile.model_copy(update={"client_name": name})

    def remove(self, client_name):
        self._profiles.pop(_require_name(client_name), None)

    def list_profiles(self):
        return [self._profiles[name] for name in sorted(self._profiles)]


class SqlDiscountProfileStore(ClientDiscountProfileStore):
    """Durable store on the client_discount_profiles table."""

    def __init__(self, db: Session):
        self.db = db

    def _row(self, name: str):
        return self.db.query(models.ClientDiscountProfile).filter(
            models.ClientDiscountProfile.client_name == name
        ).first()

    def get(self, client_name):
        name = _require_name(client_name)
        try:
            row = self._row(name)
        except SQLAlchemyError as e:
            logger.warning("Could not read discount profile for %s: %s", name, e)
            raise PersistenceError(f"Could not load discount profile for {name}") from e
        return ClientDiscountProfile.model_validate(row) if row else None

    def upsert(self, profile):
        name = _require_name(profile.client_name)
        try:
            row = self._row(name)
            if not row:
                row = models.ClientDiscountProfile(client_name=name)
                self.db.add(row)
            row.difficulty_percent = profile.difficulty_percent
            row.custom_discount_percent = profile.custom_discount_percent
            row.has_difficulty_level = profile.has_difficulty_level
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning("Could not save discount profile for %s: %s", name, e)
            raise PersistenceError(f"Could not save discount profile for {name}") from e
        logger.info("Saved discount profile for %s", name)

    def remove(self, client_name):
        name = _require_name(client_name)
        try:
            self.db.query(models.ClientDiscountProfile).filter(
                models.ClientDiscountProfile.client_name == name
            ).delete()
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"Could not remove discount profile for {name}") from e

    def list_profiles(self):
        try:
            rows = self.db.query(models.ClientDiscountProfile).order_by(
                models.ClientDiscountProfile.client_name
            ).all()
        except SQLAlchemyError as e:
            raise PersistenceError("Could not load discount profiles") from e
        return [ClientDiscountProfile.model_validate(r) for r in rows]
