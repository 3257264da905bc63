"""Tests for the itinerary, edit and packing list flows."""

import copy

import pytest

from waylo.data.models import NO_SPECIAL_EVENTS, PackingListRequest
from waylo.flows.edit import EditItineraryFlow
from waylo.flows.itinerary import ItineraryFlow
from waylo.flows.packing import PackingListFlow
from waylo.utils.error_handling import GenerationError, ValidationError


def _prompt_of(mock_client) -> str:
    contents = mock_client.aio.models.generate_content.call_args.kwargs["contents"]
    assert len(contents) == 1
    return contents[0].parts[0].text


async def test_rome_itinerary(
    mock_gemini_client, response_factory, rome_request, rome_itinerary_payload
):
    mock_gemini_client.aio.models.generate_content.return_value = response_factory(
        rome_itinerary_payload
    )
    flow = ItineraryFlow(client=mock_gemini_client)

    plan = await flow.generate(rome_request)

    assert plan.day_count == rome_request.num_days == 3
    assert all(day.activities for day in plan.itinerary)
    assert plan.local_events

    prompt = _prompt_of(mock_gemini_client)
    assert "Rome" in prompt
    assert "2025-08-11" in prompt and "2025-08-13" in prompt
    assert "Number of days: 3" in prompt
    assert "Arrival time (first day): 10:30" in prompt
    assert "Departure time" not in prompt
    assert NO_SPECIAL_EVENTS in prompt


async def test_itinerary_without_events_uses_sentinel(
    mock_gemini_client, response_factory, rome_request, rome_itinerary_payload
):
    rome_itinerary_payload["local_events"] = NO_SPECIAL_EVENTS
    mock_gemini_client.aio.models.generate_content.return_value = response_factory(
        rome_itinerary_payload
    )

    plan = await ItineraryFlow(client=mock_gemini_client).generate(rome_request)

    assert plan.local_events == NO_SPECIAL_EVENTS
    assert plan.has_local_events is False


async def test_itinerary_day_mismatch_is_not_repaired(
    mock_gemini_client, response_factory, rome_request, rome_itinerary_payload
):
    rome_itinerary_payload["itinerary"] = rome_itinerary_payload["itinerary"][:2]
    mock_gemini_client.aio.models.generate_content.return_value = response_factory(
        rome_itinerary_payload
    )

    plan = await ItineraryFlow(client=mock_gemini_client).generate(rome_request)

    assert plan.day_count == 2


async def test_itinerary_schema_failure(
    mock_gemini_client, response_factory, rome_request
):
    mock_gemini_client.aio.models.generate_content.return_value = response_factory(
        {"itinerary": []}
    )

    with pytest.raises(GenerationError) as exc_info:
        await ItineraryFlow(client=mock_gemini_client).generate(rome_request)
    assert exc_info.value.flow_name == "Itinerary Flow"


async def test_edit_keeps_day_count(
    mock_gemini_client, response_factory, rome_plan, rome_request, rome_itinerary_payload
):
    edited = copy.deepcopy(rome_itinerary_payload)
    edited["itinerary"][1]["activities"] = edited["itinerary"][1]["activities"][1:]
    mock_gemini_client.aio.models.generate_content.return_value = response_factory(edited)
    flow = EditItineraryFlow(client=mock_gemini_client)

    updated = await flow.edit(rome_plan, 'remove the "museum" on day 2', rome_request)

    assert updated.day_count == rome_plan.day_count
    assert updated.itinerary[0] == rome_plan.itinerary[0]
    assert updated.itinerary[2] == rome_plan.itinerary[2]
    assert len(updated.itinerary[1].activities) == 1

    prompt = _prompt_of(mock_gemini_client)
    assert "remove the 'museum' on day 2" in prompt
    assert "Vatican Museums" in prompt
    assert "Original user data" in prompt
    config = mock_gemini_client.aio.models.generate_content.call_args.kwargs["config"]
    assert config.temperature == 0.4


async def test_edit_without_original_request(
    mock_gemini_client, response_factory, rome_plan, rome_itinerary_payload
):
    mock_gemini_client.aio.models.generate_content.return_value = response_factory(
        rome_itinerary_payload
    )

    await EditItineraryFlow(client=mock_gemini_client).edit(rome_plan, "more food")

    assert "Original user data" not in _prompt_of(mock_gemini_client)


async def test_edit_rejects_empty_request(mock_gemini_client, rome_plan):
    with pytest.raises(ValidationError) as exc_info:
        await EditItineraryFlow(client=mock_gemini_client).edit(rome_plan, "   ")

    assert "edit_request" in exc_info.value.field_errors
    mock_gemini_client.aio.models.generate_content.assert_not_called()


async def test_packing_list(
    mock_gemini_client, response_factory, rome_request, packing_payload
):
    mock_gemini_client.aio.models.generate_content.return_value = response_factory(
        packing_payload
    )
    flow = PackingListFlow(client=mock_gemini_client)

    packing = await flow.generate(PackingListRequest.from_trip_request(rome_request))

    assert [c.category for c in packing.packing_list][:2] == ["Clothing", "Documents"]
    assert packing.general_advice
    prompt = _prompt_of(mock_gemini_client)
    assert "Rome" in prompt
    assert "Couple" in prompt
