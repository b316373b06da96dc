from sqlalchemy import Column, Integer, String, Float, DateTime, Text, Enum, Boolean, JSON
from datetime import datetime
from .database import Base
import enum


# --- Enums ---

class ServiceType(str, enum.Enum):
    SUBTITLE = "subtitle"
    TRANSCRIPTION = "transcription"


class Language(str, enum.Enum):
    THAI = "thai"
    ENGLISH = "english"


class TranscriptionVariant(str, enum.Enum):
    NORMAL = "normal"
    VERBATIM = "verbatim"
    ENGLISH_TRANSCRIPTION = "english_transcription"
    TRANSLATION = "translation"
    INTERVIEW = "interview"
    MEETING = "meeting"
    RESEARCH = "research"


class Urgency(str, enum.Enum):
    NONE = "none"
    RUSH = "rush"
    SUPER_RUSH = "super_rush"
    ULTRA_RUSH = "ultra_rush"


class ProjectStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


# --- Tables ---

class Project(Base):
    """A saved quote: job parameters plus the price breakdown at save time."""
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    job_title = Column(String, nullable=False)
    client_name = Column(String, nullable=False, index=True)
    # DECISION: service/category/urgency stored as VARCHAR, same values as the enums above
    service_type = Column(String, default=ServiceType.SUBTITLE.value)
    language = Column(String, default=Language.THAI.value)
    variant = Column(String, default=TranscriptionVariant.NORMAL.value)
    urgency = Column(String, default=Urgency.NONE.value)
    duration = Column(Float, default=0.0)  # minutes
    add_ons = Column(JSON, default=dict)
    difficulty_percent = Column(Float, default=0.0)
    custom_discount_percent = Column(Float, default=0.0)
    # Price breakdown snapshot
    base_price = Column(Float, default=0.0)
    additional_fees = Column(Float, default=0.0)
    discount = Column(Float, default=0.0)
    total = Column(Float, default=0.0)
    estimated_days = Column(Integer, default=0)
    # Scheduling
    date = Column(DateTime, default=datetime.utcnow, index=True)
    custom_due_date = Column(DateTime, nullable=True)
    status = Column(Enum(ProjectStatus), default=ProjectStatus.PENDING)
    notes = Column(Text, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class FrequentClient(Base):
    """Remembered client names offered for quick selection."""
    __tablename__ = "frequent_clients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)


class ClientDiscountProfile(Base):
    """Per-client default difficulty / custom discount. Prefill hint only."""
    __tablename__ = "client_discount_profiles"

    id = Column(Integer, primary_key=True, index=True)
    client_name = Column(String, unique=True, nullable=False)
    difficulty_percent = Column(Float, default=0.0)
    custom_discount_percent = Column(Float, default=0.0)
    has_difficulty_level = Column(Boolean, default=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class QuoteSession(Base):
    """Form state of an in-progress quote, kept between API calls."""
    __tablename__ = "quote_sessions"

    id = Column(String, primary_key=True)  # UUID
    params_json = Column(JSON, default=dict)  # QuoteSession.snapshot()
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
