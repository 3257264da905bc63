"""
DynamoDB repository for saved trips.

Maps Trip entities to/from single-table items. Dates cross the store
boundary as ISO-8601 strings: form values keep the ``{"from", "to"}``
shape the planner form submits, and are turned back into date objects
when a trip is read.
"""

from datetime import UTC, date, datetime
from typing import Any

from waylo.data.dynamodb import DynamoDBClient
from waylo.data.models import TripRequest
from waylo.data.trip_models import Trip
from waylo.utils.error_handling import PersistenceError, handle_errors
from waylo.utils.logging import get_logger

logger = get_logger(__name__)

ENTITY_TYPE = "Trip"
_KEY_FIELDS = {"pk", "sk", "gsi1pk", "gsi1sk"}


def _parse_stored_date(value: str) -> date:
    # Older records hold full timestamps ("2025-08-11T00:00:00.000Z")
    return date.fromisoformat(value.split("T", 1)[0])


def form_values_to_document(request: TripRequest | None) -> dict[str, Any] | None:
    """Serialize form values, storing the date range as ISO strings."""
    if request is None:
        return None
    document = request.model_dump(mode="json", exclude={"dates"})
    document["dates"] = {
        "from": request.dates.start.isoformat(),
        "to": request.dates.end.isoformat(),
    }
    return document


def form_values_from_document(document: dict[str, Any] | None) -> TripRequest | None:
    """Rebuild form values, turning the stored ISO strings back into dates."""
    if not document:
        return None
    dates = document.get("dates") or {}
    return TripRequest.model_validate(
        {
            **document,
            "dates": {
                "from": _parse_stored_date(dates["from"]),
                "to": _parse_stored_date(dates["to"]),
            },
        }
    )


def trip_to_document(trip: Trip) -> dict[str, Any]:
    data = trip.model_dump(mode="json", exclude=_KEY_FIELDS | {"form_values"})
    data["form_values"] = form_values_to_document(trip.form_values)
    return data


def trip_from_document(data: dict[str, Any]) -> Trip:
    return Trip.model_validate(
        {**data, "form_values": form_values_from_document(data.get("form_values"))}
    )


class TripRepository:
    """Repository for saved trips."""

    def __init__(self, db: DynamoDBClient):
        self.db = db

    def _to_item(self, trip: Trip, version: int = 1) -> dict[str, Any]:
        now = datetime.now(UTC).isoformat()
        return {
            "PK": trip.pk,
            "SK": trip.sk,
            "GSI1PK": trip.gsi1pk,
            "GSI1SK": trip.gsi1sk,
            "EntityType": ENTITY_TYPE,
            "Version": version,
            "Data": trip_to_document(trip),
            "Metadata": {
                "createdAt": trip.created_at.isoformat(),
                "updatedAt": now,
            },
        }

    def save_trip(self, trip: Trip) -> str:
        """Store a new trip and return its id."""
        self.db.put_item(self._to_item(trip))
        logger.info(f"Saved trip {trip.trip_id} for user {trip.user_id}")
        return trip.trip_id

    @handle_errors(PersistenceError, operation="read")
    def get_trip(self, trip_id: str) -> Trip | None:
        item = self.db.get_item(f"TRIP#{trip_id}", "METADATA")
        if not item:
            return None
        return trip_from_document(item["Data"])

    @handle_errors(PersistenceError, operation="read")
    def list_trips_for_user(self, user_id: str) -> list[Trip]:
        """All trips owned by a user, newest first."""
        items = self.db.query_gsi1(f"USER#{user_id}#TRIP", scan_forward=False)
        return [
            trip_from_document(i["Data"])
            for i in items
            if i.get("EntityType") == ENTITY_TYPE
        ]

    def update_trip(self, trip: Trip) -> Trip:
        """Overwrite a stored trip's data. No version check: last writer wins."""
        self.db.update_item(
            trip.pk,
            trip.sk,
            {
                "Data": trip_to_document(trip),
                "Metadata": {
                    "createdAt": trip.created_at.isoformat(),
                    "updatedAt": datetime.now(UTC).isoformat(),
                },
            },
        )
        logger.info(f"Updated trip {trip.trip_id}")
        return trip

    def delete_trip(self, trip_id: str) -> None:
        self.db.delete_item(f"TRIP#{trip_id}", "METADATA")
        logger.info(f"Deleted trip {trip_id}")
