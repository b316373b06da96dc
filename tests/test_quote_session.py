"""
QuoteSession tests: form state, recompute, client prefill, save flow.

Uses in-memory project / profile / frequent-client stores from conftest.
"""

from datetime import datetime

import pytest

from subquote import schedule
from subquote.errors import PersistenceError, ValidationError
from subquote.models import Language, ServiceType, TranscriptionVariant, Urgency
from subquote.quote_session import QuoteSession, parse_number, parse_percent, parse_due_date
from subquote.repositories import InMemoryProjectRepository
from subquote.schemas import ClientDiscountProfile


SAVE_TIME = datetime(2026, 3, 1, 9, 0)


def _fill(session, **overrides):
    fields = {"job_title": "Episode 1", "client_name": "Acme Studio", "duration_minutes": 10}
    fields.update(overrides)
    return session.update(**fields)


class FailingProjectRepository(InMemoryProjectRepository):
    def save(self, record):
        raise PersistenceError("Could not save the project, please try again")


# ============================================================
# Recompute on change
# ============================================================

def test_new_session_starts_blank(quote_session):
    assert quote_session.job.service_type == ServiceType.SUBTITLE
    assert quote_session.job.language == Language.THAI
    assert quote_session.job.urgency == Urgency.NONE
    assert quote_session.price.total == 0
    assert quote_session.price.estimated_days == 0


def test_every_update_recomputes(quote_session):
    price = quote_session.update(duration_minutes=10)
    assert price.total == 474
    assert quote_session.price is price

    price = quote_session.update(language="english")
    assert price.base_price == 724


def test_switching_urgency_replaces_previous_tier(quote_session):
    quote_session.update(service_type="transcription", duration_minutes=80, urgency="rush")
    assert quote_session.price.additional_fees == pytest.approx(720 * 0.30)
    quote_session.update(urgency="ultra_rush")
    assert quote_session.price.additional_fees == pytest.approx(720 * 0.70)
    quote_session.update(urgency="none")
    assert quote_session.price.additional_fees == 0


def test_add_on_flags_by_name_or_dict(quote_session):
    quote_session.update(duration_minutes=10, vlog=True)
    assert quote_session.job.add_ons.vlog
    quote_session.update(add_ons={"vlog": False, "dual_subs": True})
    assert not quote_session.job.add_ons.vlog
    assert quote_session.job.add_ons.dual_subs


@pytest.mark.parametrize("flag", ["false", "0", "off", "", " False ", 0, None])
def test_unchecked_form_values_leave_add_on_off(quote_session, flag):
    price = quote_session.update(duration_minutes=10, vlog=flag, add_ons={"dual_subs": flag})
    assert not quote_session.job.add_ons.vlog
    assert not quote_session.job.add_ons.dual_subs
    assert price.additional_fees == 0


def test_checked_form_values_turn_add_on_on(quote_session):
    quote_session.update(duration_minutes=10, vlog="true", add_ons={"dual_subs": "on"})
    assert quote_session.job.add_ons.vlog
    assert quote_session.job.add_ons.dual_subs


@pytest.mark.parametrize("add_ons", [["vlog"], "vlog", 3])
def test_add_ons_must_be_a_mapping(quote_session, add_ons):
    quote_session.update(duration_minutes=10)
    with pytest.raises(ValidationError):
        quote_session.update(add_ons=add_ons)
    assert quote_session.price.total == 474


def test_variant_is_a_single_choice(quote_session):
    quote_session.update(service_type="transcription", variant="verbatim", duration_minutes=10)
    quote_session.update(variant="translation")
    assert quote_session.job.variant == TranscriptionVariant.TRANSLATION
    assert quote_session.price.base_price == 350


def test_garbage_numbers_become_zero(quote_session):
    quote_session.update(duration_minutes="12abc", custom_discount_percent="", difficulty_percent=None)
    assert quote_session.job.duration_minutes == 0
    assert quote_session.job.custom_discount_percent == 0
    assert quote_session.job.difficulty_percent == 0


def test_numbers_are_clamped(quote_session):
    quote_session.update(duration_minutes=-5, custom_discount_percent=150)
    assert quote_session.job.duration_minutes == 0
    assert quote_session.job.custom_discount_percent == 100


def test_unknown_field_or_value_changes_nothing(quote_session):
    quote_session.update(duration_minutes=10)
    with pytest.raises(ValidationError):
        quote_session.update(duration_minutes=20, colour="red")
    with pytest.raises(ValidationError):
        quote_session.update(urgency="yesterday")
    assert quote_session.job.duration_minutes == 10
    assert quote_session.price.total == 474


def test_parsers():
    assert parse_number("1,250.5") == 1250.5
    assert parse_number("nan") == 0
    assert parse_number(True) == 0
    assert parse_percent("-3") == 0
    assert parse_due_date("") is None
    assert parse_due_date("2026-03-10") == datetime(2026, 3, 10)
    with pytest.raises(ValidationError):
        parse_due_date("next tuesday")


def test_offset_due_date_stored_as_naive_utc(quote_session, project_repo):
    assert parse_due_date("2026-04-01T12:00:00+07:00") == datetime(2026, 4, 1, 5, 0)
    _fill(quote_session, custom_due_date="2026-04-01T12:00:00+07:00")
    project = quote_session.save(now=SAVE_TIME)
    assert project.custom_due_date.tzinfo is None
    board = schedule.build_schedule(project_repo.list(), datetime(2026, 3, 31, 5, 0))
    assert board["projects"][0]["days_until_due"] == 1


# ============================================================
# Client selection / discount profile prefill
# ============================================================

def test_select_client_prefills_remembered_discounts(quote_session, profile_store):
    profile_store.upsert(ClientDiscountProfile(
        client_name="Acme Studio",
        difficulty_percent=20,
        custom_discount_percent=10,
        has_difficulty_level=True,
    ))
    quote_session.update(duration_minutes=10)
    quote_session.select_client("Acme Studio")

    assert quote_session.job.client_name == "Acme Studio"
    assert quote_session.job.difficulty_percent == 20
    assert quote_session.job.custom_discount_percent == 10
    assert quote_session.job.add_ons.difficulty_level
    assert quote_session.price.additional_fees == pytest.approx(474 * 0.20)
    assert quote_session.price.discount == pytest.approx(47.4)


def test_prefill_is_only_a_default(quote_session, profile_store):
    profile_store.upsert(ClientDiscountProfile(client_name="Acme Studio", custom_discount_percent=10))
    quote_session.select_client("Acme Studio")
    quote_session.update(custom_discount_percent=0)
    assert quote_session.job.custom_discount_percent == 0


def test_profile_without_difficulty_level_ignores_stored_percent(quote_session, profile_store):
    profile_store.upsert(ClientDiscountProfile(
        client_name="Acme Studio", difficulty_percent=30, has_difficulty_level=False,
    ))
    quote_session.select_client("Acme Studio")
    assert quote_session.job.difficulty_percent == 0
    assert not quote_session.job.add_ons.difficulty_level


def test_unknown_client_resets_discount_fields(quote_session):
    quote_session.update(custom_discount_percent=15, difficulty_level=True, difficulty_percent=10)
    quote_session.select_client("Brand New Client")
    assert quote_session.job.client_name == "Brand New Client"
    assert quote_session.job.custom_discount_percent == 0
    assert quote_session.job.difficulty_percent == 0
    assert not quote_session.job.add_ons.difficulty_level


def test_add_frequent_client_is_idempotent(quote_session, frequent_clients):
    quote_session.update(client_name="Acme Studio")
    quote_session.add_frequent_client()
    assert quote_session.add_frequent_client() == ["Acme Studio"]


def test_add_frequent_client_needs_a_name(quote_session):
    with pytest.raises(ValidationError):
        quote_session.add_frequent_client()


def test_remove_frequent_client_forgets_profile_and_clears_selection(quote_session, profile_store, frequent_clients):
    frequent_clients.add("Acme Studio")
    profile_store.upsert(ClientDiscountProfile(client_name="Acme Studio", custom_discount_percent=5))
    quote_session.select_client("Acme Studio")

    remaining = quote_session.remove_frequent_client("Acme Studio")

    assert remaining == []
    assert profile_store.get("Acme Studio") is None
    assert quote_session.job.client_name == ""


# ============================================================
# Save
# ============================================================

@pytest.mark.parametrize("missing", ["job_title", "client_name", "duration_minutes"])
def test_save_requires_title_client_and_duration(quote_session, project_repo, profile_store, missing):
    _fill(quote_session, **{missing: "" if missing != "duration_minutes" else 0})
    with pytest.raises(ValidationError):
        quote_session.save(now=SAVE_TIME)
    assert project_repo.list() == []
    assert profile_store.list_profiles() == []


def test_save_with_blank_client_keeps_form(quote_session):
    _fill(quote_session, client_name="   ")
    with pytest.raises(ValidationError) as exc:
        quote_session.save()
    assert "client name" in str(exc.value)
    assert quote_session.job_title == "Episode 1"
    assert quote_session.price.total == 474


def test_save_stores_record_and_resets(quote_session, project_repo):
    _fill(quote_session, urgency="rush", dual_subs=True, duration_minutes=60,
          custom_due_date="2026-03-05")
    expected_total = quote_session.price.total

    project = quote_session.save(now=SAVE_TIME)

    assert project.id == 1
    assert project.job_title == "Episode 1"
    assert project.client_name == "Acme Studio"
    assert project.urgency == Urgency.RUSH
    assert project.add_ons.dual_subs
    assert project.total == expected_total
    assert project.estimated_days == 3
    assert project.date == SAVE_TIME
    assert project.custom_due_date == datetime(2026, 3, 5)
    assert project_repo.list() == [project]

    # Form back to defaults
    assert quote_session.job_title == ""
    assert quote_session.custom_due_date is None
    assert quote_session.job.client_name == ""
    assert quote_session.job.duration_minutes == 0
    assert quote_session.job.urgency == Urgency.NONE
    assert not quote_session.job.add_ons.dual_subs


def test_save_remembers_client_discounts(quote_session, profile_store):
    _fill(quote_session, custom_discount_percent=12, difficulty_level=True, difficulty_percent=25)
    quote_session.save(now=SAVE_TIME)

    profile = profile_store.get("Acme Studio")
    assert profile.custom_discount_percent == 12
    assert profile.difficulty_percent == 25
    assert profile.has_difficulty_level


def test_save_failure_keeps_local_state(profile_store):
    session = QuoteSession(projects=FailingProjectRepository(), profiles=profile_store)
    _fill(session)
    with pytest.raises(PersistenceError):
        session.save()
    assert session.job_title == "Episode 1"
    assert session.price.total == 474
    # retry is possible once the store is back
    session.projects = InMemoryProjectRepository()
    assert session.save().total == 474


def test_snapshot_round_trip(quote_session, project_repo, profile_store):
    _fill(quote_session, service_type="transcription", variant="meeting", timestamp=True,
          custom_due_date="2026-04-01T12:00:00")
    restored = QuoteSession(projects=project_repo, profiles=profile_store)
    restored.restore(quote_session.snapshot())
    assert restored.job == quote_session.job
    assert restored.job_title == quote_session.job_title
    assert restored.custom_due_date == quote_session.custom_due_date
    assert restored.price == quote_session.price
