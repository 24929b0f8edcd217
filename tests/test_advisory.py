"""Schedule adjustment advisory flow with a stand-in model."""

import asyncio
import json

import pytest
from langchain_core.messages import AIMessage
from langchain_core.output_parsers import PydanticOutputParser
from langchain_core.runnables import RunnableLambda

from medischedule.features.advisory.schemas import AdvisoryRequest
from medischedule.features.advisory.service import AdvisoryService
from medischedule.graphs.schedule_adjustment.nodes import ScheduleAdjustmentOutput, parse_json_text
from conftest import schedule_payload


class FakeModel:
    """Records prompts and answers with a fixed output."""

    def __init__(self, output):
        self.output = output
        self.calls = []
        self.runnable = RunnableLambda(self._answer)

    def _answer(self, messages):
        self.calls.append(messages)
        if isinstance(self.output, Exception):
            raise self.output
        return self.output


SUGGESTION = ScheduleAdjustmentOutput(
    suggestedAdjustments='```json\n[{"operation": "op-1", "move_to": "OT-2", "start_time": "13:00"}]\n```',
    reasoning="OT-1 is needed for the emergency laparotomy.",
    feasibility=True,
)


async def test_blank_event_is_rejected_without_model_call(store, admin):
    model = FakeModel(SUGGESTION)

    result = await AdvisoryService.suggest_adjustment(
        store, admin, AdvisoryRequest(event_details="   "), llm=model.runnable
    )

    assert result.status == "error"
    assert result.error_kind == "validation"
    assert model.calls == []


async def test_successful_suggestion(store, admin):
    model = FakeModel(SUGGESTION)

    result = await AdvisoryService.suggest_adjustment(
        store,
        admin,
        AdvisoryRequest(event_details="Ruptured appendix, needs theater within the hour", event_kind="emergency"),
        llm=model.runnable,
    )

    assert result.ok
    assert result.result.feasibility is True
    assert result.adjustments == [{"operation": "op-1", "move_to": "OT-2", "start_time": "13:00"}]
    assert len(model.calls) == 1

    prompt = model.calls[0][-1].content
    assert "Emergency Details (if any):\nRuptured appendix" in prompt
    assert "New Event Details (if any):\n(none)" in prompt


async def test_non_json_adjustments_are_a_handled_error(store, admin):
    model = FakeModel(ScheduleAdjustmentOutput(
        suggestedAdjustments="Move the hernia repair to the afternoon.",
        reasoning="Frees the morning slot.",
        feasibility=True,
    ))

    result = await AdvisoryService.suggest_adjustment(
        store, admin, AdvisoryRequest(event_details="Add a hip replacement on Monday"), llm=model.runnable
    )

    assert result.status == "error"
    assert result.error_kind == "malformed"
    assert result.raw == "Move the hernia repair to the afternoon."
    assert result.result.reasoning == "Frees the morning slot."


async def test_output_missing_fields_is_malformed(store, admin):
    model = FakeModel({"reasoning": "No adjustments given"})

    result = await AdvisoryService.suggest_adjustment(
        store, admin, AdvisoryRequest(event_details="Cancel the 09:00 in OT-1", event_kind="cancellation"),
        llm=model.runnable,
    )

    assert result.error_kind == "malformed"


async def test_remote_failure_is_reported(store, admin):
    model = FakeModel(ConnectionError("connection reset by peer"))

    result = await AdvisoryService.suggest_adjustment(
        store, admin, AdvisoryRequest(event_details="Postpone the cholecystectomy", event_kind="postponement"),
        llm=model.runnable,
    )

    assert result.error_kind == "remote"
    assert "connection reset" in result.message


async def test_timeout_is_a_remote_error(store, admin):
    async def slow(messages):
        await asyncio.sleep(5)
        return SUGGESTION

    result = await AdvisoryService.suggest_adjustment(
        store, admin, AdvisoryRequest(event_details="Add a craniotomy"), llm=RunnableLambda(slow), timeout=0.05
    )

    assert result.error_kind == "remote"


async def test_second_call_while_busy(store, admin):
    release = asyncio.Event()
    calls = []

    async def waiting(messages):
        calls.append(messages)
        await release.wait()
        return SUGGESTION

    request = AdvisoryRequest(event_details="Add a thyroidectomy")
    first = asyncio.create_task(
        AdvisoryService.suggest_adjustment(store, admin, request, llm=RunnableLambda(waiting))
    )
    while not calls:
        await asyncio.sleep(0.01)

    second = await AdvisoryService.suggest_adjustment(store, admin, request, llm=RunnableLambda(waiting))
    release.set()
    first_result = await first

    assert second.error_kind == "busy"
    assert first_result.ok
    assert len(calls) == 1


async def test_snapshots_come_from_the_store(store, admin, seeded):
    await store.create("operation_schedules", schedule_payload(seeded), admin)
    cancelled = await store.create("operation_schedules", schedule_payload(seeded, start_time="14:00", end_time="15:00"), admin)
    await store.update("operation_schedules", cancelled.id, {"status": "cancelled"}, admin)
    await store.create("resources", {"name": "Propofol", "type": "drug", "quantity": 10}, admin)
    await store.create("resources", {"name": "Mesh", "type": "material", "quantity": 0}, admin)

    schedule = json.loads(await AdvisoryService.build_schedule_snapshot(store))
    constraints = json.loads(await AdvisoryService.build_hospital_constraints(store))

    assert [s["start_time"] for s in schedule] == ["09:00"]
    assert constraints["operatingHours"] == "08:00-20:00"
    assert [r["room_number"] for r in constraints["rooms"]] == ["OT-1", "OT-2"]
    assert constraints["rooms"][0]["equipment"] == ["C-arm"]
    assert {d["name"] for d in constraints["doctors"]} == {"Dr. Ama Mensah", "Dr. Kofi Owusu"}
    assert [i["name"] for i in constraints["inventory"]] == ["Propofol"]


def test_parse_json_text_tolerates_fences():
    assert parse_json_text('{"a": 1}') == {"a": 1}
    assert parse_json_text('Here you go:\n```json\n{"a": 1}\n```') == {"a": 1}
    assert parse_json_text("```\n[1, 2]\n```") == [1, 2]


def test_parse_json_text_rejects_runaway_nesting():
    with pytest.raises(ValueError):
        parse_json_text("[" * 100000)


async def test_deeply_nested_adjustments_are_malformed(store, admin):
    model = FakeModel(ScheduleAdjustmentOutput(
        suggestedAdjustments="[" * 100000,
        reasoning="Shift everything.",
        feasibility=True,
    ))

    result = await AdvisoryService.suggest_adjustment(
        store, admin, AdvisoryRequest(event_details="Add a knee arthroscopy"), llm=model.runnable
    )

    assert result.status == "error"
    assert result.error_kind == "malformed"


async def test_structured_output_schema_failure_is_malformed(store, admin):
    answer = '{"reasoning": "only reasoning came back"}'
    model = RunnableLambda(lambda messages: AIMessage(content=answer)) | PydanticOutputParser(
        pydantic_object=ScheduleAdjustmentOutput
    )

    result = await AdvisoryService.suggest_adjustment(
        store, admin, AdvisoryRequest(event_details="Postpone the hip replacement", event_kind="postponement"),
        llm=model,
    )

    assert result.error_kind == "malformed"
    assert "only reasoning came back" in result.raw


async def test_blank_event_skips_snapshot_reads(store, admin, monkeypatch):
    async def unreachable(*args, **kwargs):
        raise AssertionError("snapshot built for a blank event")

    monkeypatch.setattr(AdvisoryService, "build_schedule_snapshot", unreachable)
    monkeypatch.setattr(AdvisoryService, "build_hospital_constraints", unreachable)

    result = await AdvisoryService.suggest_adjustment(store, admin, AdvisoryRequest(event_details="\n\t "))

    assert result.error_kind == "validation"
