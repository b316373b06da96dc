"""
Quote Session: the price calculator form as an object.

Holds the current job fields, recomputes the price synchronously on every
change, prefills discount fields from a remembered client profile, and on
save hands the finished quote to the project store.

Collaborators are injected so the store can be a database, memory, or a mock.
"""

import logging
from datetime import date, datetime, timezone
from typing import Optional

from .discount_profiles import ClientDiscountProfileStore
from .errors import ValidationError
from .models import ServiceType, Language, TranscriptionVariant, Urgency
from .pricing_engine import PricingEngine
from .repositories import FrequentClientRepository, ProjectRepository
from .schemas import AddOns, ClientDiscountProfile, JobInput, PriceDetails, Project, ProjectCreate

logger = logging.getLogger(__name__)

ENUM_FIELDS = {
    "service_type": ServiceType,
    "language": Language,
    "variant": TranscriptionVariant,
    "urgency": Urgency,
}

PERCENT_FIELDS = ("difficulty_percent", "custom_discount_percent")

ADD_ON_FIELDS = tuple(AddOns.model_fields)


# --- Input coercion (forms send partial / garbage input while typing) ---

def parse_number(value, default: float = 0.0) -> float:
    """Parse a number from user input. Anything unparseable becomes the default."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(str(value).strip().replace(",", ""))
    except (ValueError, TypeError):
        return default
    if number != number or number in (float("inf"), float("-inf")):
        return default
    return number


def parse_duration(value) -> float:
    return max(parse_number(value), 0.0)


def parse_percent(value) -> float:
    return min(max(parse_number(value), 0.0), 100.0)


FALSE_FLAGS = ("", "0", "false", "off", "no")


def parse_flag(value) -> bool:
    """Checkbox input: form strings like "false", "0" or "off" mean unchecked."""
    if isinstance(value, str):
        return value.strip().lower() not in FALSE_FLAGS
    return bool(value)


def parse_due_date(value) -> Optional[datetime]:
    """
    Accepts a datetime, a date, an ISO string, or blank (no custom due date).
    Offset-aware values are converted to naive UTC.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip())
        except ValueError:
            raise ValidationError(f"Invalid due date: {value}")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


class QuoteSession:

    def __init__(
        self,
        projects: ProjectRepository,
        profiles: ClientDiscountProfileStore,
        clients: Optional[FrequentClientRepository] = None,
        engine: Optional[PricingEngine] = None,
    ):
        self.projects = projects
        self.profiles = profiles
        self.clients = clients
        self.engine = engine or PricingEngine()
        self.reset()

    # --- State ---

    def reset(self) -> PriceDetails:
        """Back to a blank subtitle / Thai / no-urgency form."""
        self.job_title = ""
        self.custom_due_date: Optional[datetime] = None
        self.job = JobInput()
        return self._recompute()

    def _recompute(self) -> PriceDetails:
        self.price = self.engine.compute_quote(self.job)
        return self.price

    def update(self, **fields) -> PriceDetails:
        """
        Apply one or more field changes and return the fresh price.

        Numbers are coerced permissively (garbage -> 0). Unknown field names
        and unknown enum values raise ValidationError and change nothing.
        """
        data = self.job.model_dump()
        job_title = self.job_title
        custom_due_date = self.custom_due_date

        for name, value in fields.items():
            if name == "job_title":
                job_title = str(value or "")
            elif name == "custom_due_date":
                custom_due_date = parse_due_date(value)
            elif name == "client_name":
                data["client_name"] = str(value or "")
            elif name == "duration_minutes":
                data["duration_minutes"] = parse_duration(value)
            elif name in PERCENT_FIELDS:
                data[name] = parse_percent(value)
            elif name in ENUM_FIELDS:
                try:
                    data[name] = ENUM_FIELDS[name](value)
                except ValueError:
                    raise ValidationError(f"Invalid {name.replace('_', ' ')}: {value}")
            elif name == "add_ons":
                if value is None:
                    value = {}
                if not isinstance(value, dict):
                    raise ValidationError("add_ons must be an object")
                for add_on, flag in value.items():
                    if add_on not in ADD_ON_FIELDS:
                        raise ValidationError(f"Unknown add-on: {add_on}")
                    data["add_ons"][add_on] = parse_flag(flag)
            elif name in ADD_ON_FIELDS:
                data["add_ons"][name] = parse_flag(value)
            else:
                raise ValidationError(f"Unknown field: {name}")

        self.job = JobInput(**data)
        self.job_title = job_title
        self.custom_due_date = custom_due_date
        return self._recompute()

    # --- Clients ---

    def select_client(self, client_name: str) -> PriceDetails:
        """
        Pick a client and prefill their remembered discount settings.

        The profile is only a starting point; the fields stay editable and
        clients without a profile start from zero.
        """
        profile = self.profiles.get(client_name) if (client_name or "").strip() else None
        if profile:
            return self.update(
                client_name=client_name,
                difficulty_percent=profile.difficulty_percent if profile.has_difficulty_level else 0,
                custom_discount_percent=profile.custom_discount_percent,
                difficulty_level=profile.has_difficulty_level,
            )
        return self.update(
            client_name=client_name,
            difficulty_percent=0,
            custom_discount_percent=0,
            difficulty_level=False,
        )

    def add_frequent_client(self) -> list[str]:
        """Remember the current client name in the frequent-client list."""
        if self.clients is None:
            raise ValidationError("No frequent-client list configured")
        name = self.job.client_name.strip()
        if not name:
            raise ValidationError("Enter a client name first")
        if name not in self.clients.list():
            self.clients.add(name)
        return self.clients.list()

    def remove_frequent_client(self, client_name: str) -> list[str]:
        """Forget a client: drops it from the list and deletes its discount profile."""
        if self.clients is None:
            raise ValidationError("No frequent-client list configured")
        self.clients.remove(client_name)
        self.profiles.remove(client_name)
        if self.job.client_name == client_name:
            self.update(client_name="")
        return self.clients.list()

    # --- Save ---

    def validate(self) -> None:
        missing = []
        if not self.job_title.strip():
            missing.append("job title")
        if not self.job.client_name.strip():
            missing.append("client name")
        if self.job.duration_minutes <= 0:
            missing.append("duration")
        if missing:
            raise ValidationError(
                "Job title, client name and duration are required "
                f"(missing: {', '.join(missing)})"
            )

    def build_record(self, now: Optional[datetime] = None) -> ProjectCreate:
        price = self.price
        return ProjectCreate(
            job_title=self.job_title.strip(),
            client_name=self.job.client_name.strip(),
            service_type=self.job.service_type,
            language=self.job.language,
            variant=self.job.variant,
            urgency=self.job.urgency,
            duration=self.job.duration_minutes,
            add_ons=self.job.add_ons,
            difficulty_percent=self.job.difficulty_percent,
            custom_discount_percent=self.job.custom_discount_percent,
            base_price=price.base_price,
            additional_fees=price.additional_fees,
            discount=price.discount,
            total=price.total,
            estimated_days=price.estimated_days,
            date=now or datetime.utcnow(),
            custom_due_date=self.custom_due_date,
        )

    def save(self, now: Optional[datetime] = None) -> Project:
        """
        Validate, remember the client's discount settings, store the project
        and reset the form.

        Raises ValidationError (nothing stored) or PersistenceError (form left
        as-is so the user can retry).
        """
        try:
            self.validate()
        except ValidationError as e:
            logger.warning("Quote not saved: %s", e)
            raise

        record = self.build_record(now)
        self.profiles.upsert(ClientDiscountProfile(
            client_name=record.client_name,
            difficulty_percent=self.job.difficulty_percent,
            custom_discount_percent=self.job.custom_discount_percent,
            has_difficulty_level=self.job.add_ons.difficulty_level,
        ))
        project = self.projects.save(record)
        logger.info("Quote saved as project %d, total %.2f", project.id, project.total)
        self.reset()
        return project

    # --- Snapshot (API keeps sessions between requests) ---

    def snapshot(self) -> dict:
        return {
            "job_title": self.job_title,
            "custom_due_date": self.custom_due_date.isoformat() if self.custom_due_date else None,
            "job": self.job.model_dump(mode="json"),
        }

    def restore(self, data: dict) -> PriceDetails:
        self.job_title = data.get("job_title", "")
        self.custom_due_date = parse_due_date(data.get("custom_due_date"))
        self.job = JobInput(**data.get("job", {}))
        return self._recompute()

    def to_dict(self) -> dict:
        return {
            **self.snapshot(),
            "price": self.price.model_dump(),
            "priority": self.engine.priority_label(self.job.urgency),
            "estimated_throughput": self.engine.throughput_for(self.job),
        }
