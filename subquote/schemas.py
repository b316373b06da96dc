from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from .models import ServiceType, Language, TranscriptionVariant, Urgency, ProjectStatus


# --- Quote inputs / outputs ---

class AddOns(BaseModel):
    """Independent add-on flags. Which ones are priced depends on the service."""
    # Subtitle
    vlog: bool = False
    unclear_audio: bool = False
    dual_subs: bool = False
    # Transcription
    unclear_audio_per_minute: bool = False
    timestamp: bool = False
    # Both
    difficulty_level: bool = False


# Legacy boolean keys -> resolved enum value, highest priority first
LEGACY_VARIANT_FLAGS = [
    ("translation", TranscriptionVariant.TRANSLATION),
    ("englishTranscription", TranscriptionVariant.ENGLISH_TRANSCRIPTION),
    ("verbatim", TranscriptionVariant.VERBATIM),
    ("interview", TranscriptionVariant.INTERVIEW),
    ("meeting", TranscriptionVariant.MEETING),
    ("research", TranscriptionVariant.RESEARCH),
]

LEGACY_URGENCY_FLAGS = [
    ("ultraRush", Urgency.ULTRA_RUSH),
    ("superRush", Urgency.SUPER_RUSH),
    ("rush", Urgency.RUSH),
]

LEGACY_ADD_ON_FLAGS = {
    "vlog": "vlog",
    "unclearAudio": "unclear_audio",
    "dualSubs": "dual_subs",
    "unclearAudio1": "unclear_audio_per_minute",
    "timestamp": "timestamp",
    "difficultyLevel": "difficulty_level",
}


class JobInput(BaseModel):
    service_type: ServiceType = ServiceType.SUBTITLE
    language: Language = Language.THAI  # subtitle only
    variant: TranscriptionVariant = TranscriptionVariant.NORMAL  # transcription only
    duration_minutes: float = Field(default=0.0, ge=0)
    add_ons: AddOns = Field(default_factory=AddOns)
    urgency: Urgency = Urgency.NONE
    difficulty_percent: float = Field(default=0.0, ge=0, le=100)
    custom_discount_percent: float = Field(default=0.0, ge=0, le=100)
    client_name: str = ""

    @classmethod
    def from_additional_services(cls, flags: dict, **fields) -> "JobInput":
        """
        Build a JobInput from the old `additional_services` boolean dict.

        Variant and urgency were independent booleans there; the highest
        priority flag that is set wins, the rest are ignored.
        """
        variant = TranscriptionVariant.NORMAL
        for key, value in LEGACY_VARIANT_FLAGS:
            if flags.get(key):
                variant = value
                break

        urgency = Urgency.NONE
        for key, value in LEGACY_URGENCY_FLAGS:
            if flags.get(key):
                urgency = value
                break

        add_ons = AddOns(**{
            name: bool(flags.get(key, False))
            for key, name in LEGACY_ADD_ON_FLAGS.items()
        })
        return cls(variant=variant, urgency=urgency, add_ons=add_ons, **fields)


class PriceDetails(BaseModel):
    """Computed breakdown. total == base_price + additional_fees - discount."""
    base_price: float = 0.0
    additional_fees: float = 0.0
    discount: float = 0.0
    total: float = 0.0
    estimated_days: int = 0

    class Config:
        frozen = True


class QuoteResponse(BaseModel):
    job: JobInput
    price: PriceDetails
    priority: str
    display: dict  # presentation-rounded values


# --- Client discount profiles ---

class ClientDiscountProfile(BaseModel):
    client_name: str
    difficulty_percent: float = Field(default=0.0, ge=0, le=100)
    custom_discount_percent: float = Field(default=0.0, ge=0, le=100)
    has_difficulty_level: bool = False

    class Config:
        from_attributes = True


class ClientDiscountUpdate(BaseModel):
    difficulty_percent: float = Field(default=0.0, ge=0, le=100)
    custom_discount_percent: float = Field(default=0.0, ge=0, le=100)
    has_difficulty_level: bool = False


class FrequentClientCreate(BaseModel):
    name: str


# --- Projects ---

class ProjectCreate(BaseModel):
    """Everything handed to the project store on save."""
    job_title: str
    client_name: str
    service_type: ServiceType
    language: Language
    variant: TranscriptionVariant
    urgency: Urgency
    duration: float
    add_ons: AddOns
    difficulty_percent: float = 0.0
    custom_discount_percent: float = 0.0
    base_price: float
    additional_fees: float
    discount: float
    total: float
    estimated_days: int
    date: datetime
    custom_due_date: Optional[datetime] = None


class Project(ProjectCreate):
    id: int
    status: ProjectStatus = ProjectStatus.PENDING
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class ProjectUpdate(BaseModel):
    status: Optional[ProjectStatus] = None
    notes: Optional[str] = None


class ProjectPage(BaseModel):
    items: List[Project]
    page: int
    total_pages: int
    total_items: int
