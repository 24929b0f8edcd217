# Schedule Adjustment Advisory Feature - Service

import json
from typing import Optional, Set
from pymongo.errors import PyMongoError
from medischedule.config import settings
from medischedule.core.logging import logger
from medischedule.features.advisory.schemas import AdvisoryRequest, AdvisoryResult
from medischedule.graphs.schedule_adjustment import schedule_adjustment_graph
from medischedule.shared.schemas import Actor
from medischedule.store import DocumentStore


SCHEDULE_FIELDS = {
    "id", "procedure", "patient_id", "doctor_id", "ot_id",
    "date", "start_time", "end_time", "status",
}
ROOM_FIELDS = {"id", "room_number", "status", "capacity", "equipment"}
DOCTOR_FIELDS = {"id", "name", "specialization", "availability", "shift_hours"}
INVENTORY_FIELDS = {"name", "type", "quantity", "unit"}


class AdvisoryService:
    """Service class for model-backed schedule adjustment suggestions."""

    # Actors with a suggestion in progress
    _in_flight: Set[str] = set()

    @staticmethod
    async def build_schedule_snapshot(store: DocumentStore, from_date: Optional[str] = None) -> str:
        """JSON list of operations still to happen."""
        filters = {"status": "scheduled"}
        if from_date:
            filters["date"] = {"$gte": from_date}
        schedules = await store.find(
            "operation_schedules", filters, sort=[("date", 1), ("start_time", 1)]
        )
        return json.dumps([s.model_dump(mode="json", include=SCHEDULE_FIELDS) for s in schedules])

    @staticmethod
    async def build_hospital_constraints(store: DocumentStore) -> str:
        """JSON object of rooms, doctor availability, inventory and operating hours."""
        rooms = await store.find("ot_rooms", sort=[("room_number", 1)])
        doctors = await store.find("doctors", sort=[("name", 1)])
        inventory = await store.find("resources", {"quantity": {"$gt": 0}}, sort=[("name", 1)])
        return json.dumps({
            "operatingHours": settings.OPERATING_HOURS,
            "rooms": [r.model_dump(mode="json", include=ROOM_FIELDS) for r in rooms],
            "doctors": [d.model_dump(mode="json", include=DOCTOR_FIELDS) for d in doctors],
            "inventory": [i.model_dump(mode="json", include=INVENTORY_FIELDS) for i in inventory],
        })

    @staticmethod
    async def suggest_adjustment(
        store: DocumentStore,
        actor: Actor,
        request: AdvisoryRequest,
        llm=None,
        timeout: Optional[float] = None,
    ) -> AdvisoryResult:
        """
        Ask the model how to absorb a schedule change.

        Nothing is written; applying a suggestion is a separate edit. One
        call per actor may be outstanding, a second one is answered with
        ``busy`` without reaching the model.

        Args:
            llm: Runnable to use instead of the configured OpenAI model
            timeout: Seconds to wait for the model, defaults to settings
        """
        if not request.event_details.strip():
            return AdvisoryResult(status="error", error_kind="validation", message="Event details are required")

        if actor.id in AdvisoryService._in_flight:
            logger.warning(f"Advisory re-submission refused for {actor.id}")
            return AdvisoryResult(
                status="error",
                error_kind="busy",
                message="A suggestion is already being prepared",
            )

        AdvisoryService._in_flight.add(actor.id)
        try:
            try:
                current_schedule = request.current_schedule
                if current_schedule is None:
                    current_schedule = await AdvisoryService.build_schedule_snapshot(store, request.from_date)
                hospital_constraints = request.hospital_constraints
                if hospital_constraints is None:
                    hospital_constraints = await AdvisoryService.build_hospital_constraints(store)
            except PyMongoError as e:
                logger.error(f"Could not assemble advisory snapshots: {e}")
                return AdvisoryResult(status="error", error_kind="remote", message=f"Could not load schedule: {e}")

            configurable = {"timeout": timeout or settings.ADVISORY_TIMEOUT_SECONDS}
            if llm is not None:
                configurable["llm"] = llm

            state = await schedule_adjustment_graph.ainvoke(
                {
                    "current_schedule": current_schedule,
                    "hospital_constraints": hospital_constraints,
                    "event_details": request.event_details,
                    "event_kind": request.event_kind,
                },
                config={"configurable": configurable},
            )
        finally:
            AdvisoryService._in_flight.discard(actor.id)

        if state.get("status") != "completed":
            return AdvisoryResult(
                status="error",
                error_kind=state.get("error_kind"),
                message=state.get("message"),
                result=state.get("result"),
                raw=state.get("raw"),
            )

        return AdvisoryResult(
            status="success",
            result=state.get("result"),
            adjustments=state.get("adjustments"),
            raw=state.get("raw"),
        )
