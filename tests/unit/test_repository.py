"""Tests for the trip repository."""

from datetime import UTC, date, datetime

import pytest

from waylo.data.repository import (
    TripRepository,
    form_values_from_document,
    form_values_to_document,
)
from waylo.data.trip_models import Trip
from waylo.utils.error_handling import PersistenceError


@pytest.fixture
def repo(mock_db):
    return TripRepository(mock_db)


@pytest.fixture
def trip(rome_request, rome_plan, packing_list):
    return Trip.from_plan("u1", rome_request, rome_plan, packing_list)


def test_trip_keys(trip):
    assert trip.pk == f"TRIP#{trip.trip_id}"
    assert trip.sk == "METADATA"
    assert trip.gsi1pk == "USER#u1#TRIP"
    assert trip.trip_id.startswith("trip-")


def test_save_trip(repo, mock_db, trip):
    trip_id = repo.save_trip(trip)

    assert trip_id == trip.trip_id
    item = mock_db.put_item.call_args[0][0]
    assert item["PK"] == trip.pk
    assert item["GSI1PK"] == "USER#u1#TRIP"
    assert item["EntityType"] == "Trip"
    assert item["Data"]["form_values"]["dates"] == {"from": "2025-08-11", "to": "2025-08-13"}
    assert "pk" not in item["Data"]


def test_saved_dates_round_trip(repo, mock_db, trip):
    repo.save_trip(trip)
    stored = mock_db.put_item.call_args[0][0]
    mock_db.get_item.return_value = stored

    loaded = repo.get_trip(trip.trip_id)

    assert loaded.form_values.start_date == date(2025, 8, 11)
    assert loaded.form_values.end_date == date(2025, 8, 13)
    assert loaded.start_date == date(2025, 8, 11)
    assert loaded.itinerary == trip.itinerary
    assert loaded.packing_list == trip.packing_list
    mock_db.get_item.assert_called_once_with(trip.pk, "METADATA")


def test_form_values_accept_timestamps(rome_request):
    document = form_values_to_document(rome_request)
    document["dates"] = {
        "from": "2025-08-11T00:00:00.000Z",
        "to": "2025-08-13T00:00:00.000Z",
    }

    restored = form_values_from_document(document)

    assert restored.dates == rome_request.dates


def test_form_values_missing():
    assert form_values_to_document(None) is None
    assert form_values_from_document(None) is None


def test_get_trip_not_found(repo, mock_db):
    mock_db.get_item.return_value = None
    assert repo.get_trip("missing") is None


def test_get_trip_wraps_unexpected_errors(repo, mock_db):
    mock_db.get_item.return_value = {"Data": {"trip_id": "broken"}}

    with pytest.raises(PersistenceError) as exc_info:
        repo.get_trip("broken")
    assert exc_info.value.operation == "read"


def test_list_trips_for_user(repo, mock_db, trip):
    repo.save_trip(trip)
    stored = mock_db.put_item.call_args[0][0]
    mock_db.query_gsi1.return_value = [stored, {"EntityType": "Other", "Data": {}}]

    trips = repo.list_trips_for_user("u1")

    assert [t.trip_id for t in trips] == [trip.trip_id]
    mock_db.query_gsi1.assert_called_once_with("USER#u1#TRIP", scan_forward=False)


def test_update_trip(repo, mock_db, trip):
    trip.created_at = datetime(2025, 7, 1, tzinfo=UTC)

    repo.update_trip(trip)

    pk, sk, updates = mock_db.update_item.call_args[0]
    assert (pk, sk) == (trip.pk, "METADATA")
    assert updates["Data"]["trip_id"] == trip.trip_id
    assert updates["Metadata"]["createdAt"] == "2025-07-01T00:00:00+00:00"


def test_delete_trip(repo, mock_db):
    repo.delete_trip("trip-1")
    mock_db.delete_item.assert_called_once_with("TRIP#trip-1", "METADATA")
