"""
AWS Lambda handler for the Waylo planner.

Routes events by "action" field to the planner and trip services. Each
event carries the caller's userId and email plus the client-local usage
blob; the response echoes the blob back, updated.
"""

import asyncio
import json
from typing import Any, TypeVar

from google import genai
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from waylo.config import WayloConfig, initialize_config
from waylo.data.dynamodb import DynamoDBClient
from waylo.data.models import ChatMessage, ItineraryPlan, PackingList, TripRequest
from waylo.data.repository import TripRepository
from waylo.services.planner_service import PlannerService, PlanResult
from waylo.services.session import Session
from waylo.services.trip_service import TripService
from waylo.services.usage_tracker import USAGE_STORAGE_KEY
from waylo.utils.error_handling import ValidationError, WayloError
from waylo.utils.helpers import safe_load_json
from waylo.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


def _extract_user_id(user_id_raw: str) -> str:
    """Extract user ID from USER#123 format."""
    if user_id_raw.startswith("USER#"):
        return user_id_raw[5:]
    return user_id_raw


def _get_settings() -> WayloConfig:
    return initialize_config(validate=False)


def _get_client(settings: WayloConfig) -> genai.Client:
    return genai.Client(api_key=settings.api.gemini_api_key)


def _get_repo(settings: WayloConfig) -> TripRepository:
    db = DynamoDBClient(
        table_name=settings.api.dynamodb_table_name,
        region=settings.api.aws_region,
        endpoint_url=settings.api.dynamodb_endpoint,
    )
    return TripRepository(db)


def _get_planner_service() -> PlannerService:
    settings = _get_settings()
    return PlannerService.from_config(settings, _get_client(settings))


def _get_trip_service() -> TripService:
    settings = _get_settings()
    return TripService.from_config(settings, _get_repo(settings), _get_client(settings))


def _usage_store(raw_usage: Any) -> dict[str, str]:
    """Client-local usage blob, as a JSON string or an object, to a store."""
    if not raw_usage:
        return {}
    if isinstance(raw_usage, str):
        return {USAGE_STORAGE_KEY: raw_usage}
    return {USAGE_STORAGE_KEY: json.dumps(raw_usage)}


def _usage_blob(session: Session) -> dict[str, Any] | None:
    raw = session.usage_store.get(USAGE_STORAGE_KEY)
    return safe_load_json(raw) or None


def route_event(event: dict[str, Any]) -> tuple[str, Session, dict[str, Any]]:
    """Parse event and extract action, session and parameters."""
    action = event.get("action") or "unknown"
    session = Session(
        user_id=_extract_user_id(str(event.get("userId") or "")),
        email=event.get("email") or "",
        usage_store=_usage_store(event.get("usage")),
    )

    params: dict[str, Any] = {
        "form": event.get("form") or {},
        "plan": event.get("plan"),
        "trip_id": event.get("tripId"),
        "edit_request": event.get("editRequest") or "",
        "message": event.get("message") or "",
        "history": event.get("history") or [],
    }
    return action, session, params


def _require(params: dict[str, Any], key: str) -> Any:
    value = params.get(key)
    if not value:
        raise ValidationError(f"Missing parameter: {key}", field_errors={key: "required"})
    return value


def _parse(model: type[M], data: Any, field: str) -> M:
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid {field}", field_errors={field: str(e)}) from e


def _require_user(session: Session) -> None:
    if not session.user_id:
        raise ValidationError("Missing userId", field_errors={"userId": "required"})


async def _handle_generate_plan(session: Session, params: dict[str, Any]) -> dict[str, Any]:
    service = _get_planner_service()
    result = await service.generate(session, params["form"])
    return {
        "status": "ok",
        "plan": {
            "request": result.request.model_dump(mode="json", by_alias=True),
            "itinerary": result.itinerary.model_dump(mode="json"),
            "packing_list": result.packing_list.model_dump(mode="json"),
        },
        "view": result.view(session, service.visible_divisor),
    }


async def _handle_save_trip(session: Session, params: dict[str, Any]) -> dict[str, Any]:
    _require_user(session)
    plan = _require(params, "plan")
    result = PlanResult(
        request=_parse(TripRequest, plan.get("request"), "plan.request"),
        itinerary=_parse(ItineraryPlan, plan.get("itinerary"), "plan.itinerary"),
        packing_list=_parse(PackingList, plan.get("packing_list"), "plan.packing_list"),
    )
    trip_id = _get_trip_service().save(session, result)
    return {"status": "ok", "trip_id": trip_id}


async def _handle_list_trips(session: Session, params: dict[str, Any]) -> dict[str, Any]:
    _require_user(session)
    trips = _get_trip_service().list_trips(session)
    return {
        "status": "ok",
        "data": [
            {
                "trip_id": t.trip_id,
                "destination": t.destination,
                "start_date": t.start_date.isoformat(),
                "end_date": t.end_date.isoformat(),
                "created_at": t.created_at.isoformat(),
            }
            for t in trips
        ],
    }


async def _handle_get_trip(session: Session, params: dict[str, Any]) -> dict[str, Any]:
    _require_user(session)
    service = _get_trip_service()
    trip = service.get_trip(session, _require(params, "trip_id"))
    return {
        "status": "ok",
        "data": trip.model_dump(mode="json", exclude={"pk", "sk", "gsi1pk", "gsi1sk"}),
        "view": service.view(trip),
    }


async def _handle_edit_trip(session: Session, params: dict[str, Any]) -> dict[str, Any]:
    _require_user(session)
    service = _get_trip_service()
    trip = await service.edit_trip(
        session, _require(params, "trip_id"), params["edit_request"]
    )
    return {"status": "ok", "view": service.view(trip)}


async def _handle_delete_trip(session: Session, params: dict[str, Any]) -> dict[str, Any]:
    _require_user(session)
    _get_trip_service().delete_trip(session, _require(params, "trip_id"))
    return {"status": "ok"}


async def _handle_chat(session: Session, params: dict[str, Any]) -> dict[str, Any]:
    _require_user(session)
    history = [_parse(ChatMessage, m, "history") for m in params["history"]]
    chat = _get_trip_service().chat_session(
        session, _require(params, "trip_id"), transcript=history
    )
    reply = await chat.send(params["message"])
    return {
        "status": "ok",
        "response": reply.content,
        "history": [m.model_dump(mode="json") for m in chat.transcript],
    }


async def _handle_get_usage(session: Session, params: dict[str, Any]) -> dict[str, Any]:
    settings = _get_settings()
    tracker = session.usage_tracker(settings.system.usage_limit)
    usage = tracker.get_usage()
    return {
        "status": "ok",
        "data": {
            "count": usage.count,
            "month": usage.month,
            "limit": tracker.limit,
            "remaining": tracker.remaining(),
            "is_premium": session.is_premium,
        },
    }


# Action handlers map
_HANDLERS = {
    "generate_plan": _handle_generate_plan,
    "save_trip": _handle_save_trip,
    "list_trips": _handle_list_trips,
    "get_trip": _handle_get_trip,
    "edit_trip": _handle_edit_trip,
    "delete_trip": _handle_delete_trip,
    "chat": _handle_chat,
    "get_usage": _handle_get_usage,
}


async def async_handler(event: dict[str, Any]) -> dict[str, Any]:
    """Main async handler."""
    action, session, params = route_event(event)

    handler_fn = _HANDLERS.get(action)
    if not handler_fn:
        return {"status": "error", "error": f"Unknown action: {action}"}

    try:
        response = await handler_fn(session, params)
    except WayloError as e:
        logger.warning(f"{action} failed: {e}")
        response = {"status": "error", "error": str(e), "error_type": type(e).__name__}
    except Exception as e:
        logger.exception(f"Unexpected error handling {action}: {e}")
        response = {
            "status": "error",
            "error": "An unexpected error occurred",
            "error_type": "InternalError",
        }

    response["usage"] = _usage_blob(session)
    return response


def handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    """Lambda entry point (sync wrapper)."""
    setup_logging(_get_settings().system.log_level)
    return asyncio.run(async_handler(event))
