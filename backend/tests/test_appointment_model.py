from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from app.Domains.Appointment.Models.appointment import CONFIRMED, PENDING, Appointment


def test_booking_starts_pending_with_matching_timestamps():
    appointment = Appointment.book(name="Ana", phone="555-0001")

    assert appointment.status == PENDING
    assert appointment.is_confirmed is False
    assert appointment.service == "Haircut"
    assert appointment.created_at == appointment.last_updated
    assert appointment.created_at.tzinfo is not None


def test_booking_ids_are_unique():
    ids = {Appointment.book(name="Ana", phone="555-0001").id for _ in range(50)}
    assert len(ids) == 50


def test_confirm_sets_status_and_flag_together():
    appointment = Appointment.book(name="Ana", phone="555-0001")

    confirmed = appointment.confirm()

    assert confirmed.status == CONFIRMED
    assert confirmed.is_confirmed is True
    assert confirmed.id == appointment.id
    assert confirmed.created_at == appointment.created_at
    assert confirmed.last_updated >= appointment.last_updated
    # The original is untouched
    assert appointment.status == PENDING


def test_flag_is_derived_from_status_on_load():
    stale = Appointment(name="Ana", phone="555-0001", status=CONFIRMED, is_confirmed=False)
    assert stale.is_confirmed is True

    forged = Appointment(name="Ana", phone="555-0001", status=PENDING, is_confirmed=True)
    assert forged.is_confirmed is False


def test_serializes_with_camel_case_keys():
    appointment = Appointment.book(name="Ana", phone="555-0001", service="Shave")

    data = appointment.model_dump(mode="json", by_alias=True)

    assert {"isConfirmed", "createdAt", "lastUpdated"} <= set(data)
    assert Appointment.model_validate(data) == appointment


def test_unknown_status_and_empty_name_are_rejected():
    with pytest.raises(ValidationError):
        Appointment(name="Ana", phone="555-0001", status="Cancelled")
    with pytest.raises(ValidationError):
        Appointment(name="", phone="555-0001")


def test_accepts_snake_case_input():
    created = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)
    appointment = Appointment(name="Ana", phone="555-0001", created_at=created)
    assert appointment.created_at == created
