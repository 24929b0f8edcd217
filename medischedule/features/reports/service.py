# Reports & Dashboards Feature - Service

from collections import Counter, defaultdict
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence
from medischedule.features.reports.schemas import (
    RoomUtilization,
    UtilizationReportResponse,
    CountItem,
    CountReportResponse,
    AdminDashboardResponse,
    DoctorDashboardResponse,
)
from medischedule.features.schedules.service import ScheduleService
from medischedule.shared.schemas import Actor
from medischedule.shared.views import UNKNOWN_DOCTOR, build_name_map
from medischedule.store import DocumentStore


CLOSED_STATUSES = {"completed", "cancelled"}


def today_iso() -> str:
    return datetime.utcnow().date().isoformat()


def minutes_between(start_time: str, end_time: str) -> int:
    """Length of an HH:MM range in minutes."""
    start_h, start_m = (int(part) for part in start_time.split(":"))
    end_h, end_m = (int(part) for part in end_time.split(":"))
    return max(0, (end_h * 60 + end_m) - (start_h * 60 + start_m))


def summarize_utilization(
    schedules: Iterable[Any],
    rooms: Sequence[Any],
    month: Optional[str] = None,
) -> List[RoomUtilization]:
    """
    Count operations and booked minutes per room per month.

    Cancelled operations do not occupy a room and are skipped.
    """
    room_numbers = build_name_map(rooms, label="room_number")
    surgeries: Dict[tuple, int] = defaultdict(int)
    minutes: Dict[tuple, int] = defaultdict(int)

    for schedule in schedules:
        if schedule.status == "cancelled":
            continue
        schedule_month = schedule.date[:7]
        if month and schedule_month != month:
            continue
        key = (schedule.ot_id, schedule_month)
        surgeries[key] += 1
        minutes[key] += minutes_between(schedule.start_time, schedule.end_time)

    return [
        RoomUtilization(
            ot_id=ot_id,
            roomNumber=room_numbers.get(ot_id, ot_id),
            month=schedule_month,
            surgeries=surgeries[(ot_id, schedule_month)],
            booked_minutes=minutes[(ot_id, schedule_month)],
        )
        for ot_id, schedule_month in sorted(surgeries, key=lambda key: (key[1], room_numbers.get(key[0], key[0])))
    ]


def count_by(labels: Iterable[str]) -> CountReportResponse:
    """Tally labels, most frequent first."""
    counts = Counter(labels)
    items = [CountItem(name=name, count=count) for name, count in counts.most_common()]
    return CountReportResponse(items=items, total=sum(counts.values()))


def count_pending_tasks(schedules: Iterable[Any], today: str) -> int:
    """Past-dated operations that were never completed or cancelled."""
    return sum(1 for s in schedules if s.status not in CLOSED_STATUSES and s.date < today)


class ReportService:
    """Service for reports and dashboard summaries."""

    @staticmethod
    async def get_utilization(store: DocumentStore, month: Optional[str] = None) -> UtilizationReportResponse:
        filters = {"date": {"$regex": f"^{month}"}} if month else {}
        schedules = await store.find("operation_schedules", filters)
        rooms = await store.find("ot_rooms")
        return UtilizationReportResponse(month=month, rooms=summarize_utilization(schedules, rooms, month))

    @staticmethod
    async def get_surgeries_by_procedure(store: DocumentStore) -> CountReportResponse:
        schedules = await store.find("operation_schedules", {"status": {"$ne": "cancelled"}})
        return count_by(s.procedure for s in schedules)

    @staticmethod
    async def get_surgeries_per_doctor(store: DocumentStore) -> CountReportResponse:
        schedules = await store.find("operation_schedules", {"status": {"$ne": "cancelled"}})
        doctor_names = build_name_map(await store.find("doctors"))
        return count_by(doctor_names.get(s.doctor_id, UNKNOWN_DOCTOR) for s in schedules)

    @staticmethod
    async def get_admin_dashboard(store: DocumentStore, day: Optional[str] = None) -> AdminDashboardResponse:
        """
        Summary of one day's operations.

        Args:
            day: ISO date, defaults to today (UTC)

        Returns:
            AdminDashboardResponse with counts per status and the day's list
        """
        day = day or today_iso()
        schedules = await store.find("operation_schedules", {"date": day}, sort=[("start_time", 1)])
        statuses = Counter(s.status for s in schedules)
        pending_requests = await store.count("surgery_requests", {"status": "Pending"})

        return AdminDashboardResponse(
            date=day,
            total=len(schedules),
            scheduled=statuses["scheduled"],
            completed=statuses["completed"],
            cancelled=statuses["cancelled"],
            pending_requests=pending_requests,
            operations=await ScheduleService.to_views(store, schedules),
        )

    @staticmethod
    async def get_doctor_dashboard(
        store: DocumentStore,
        actor: Actor,
        day: Optional[str] = None,
        now: Optional[str] = None,
    ) -> DoctorDashboardResponse:
        """
        The acting doctor's operations for the day.

        ``now`` is an HH:MM time; the next operation is the first scheduled
        one that has not started yet.
        """
        today = today_iso()
        day = day or today
        if now is None:
            now = datetime.utcnow().strftime("%H:%M") if day == today else "00:00"

        schedules = await store.find("operation_schedules", {"doctor_id": actor.id})
        todays = sorted((s for s in schedules if s.date == day), key=lambda s: s.start_time)
        views = await ScheduleService.to_views(store, todays)
        next_operation = next(
            (view for view in views if view.status == "scheduled" and view.start_time >= now),
            None,
        )

        unread_alerts = await store.count(
            "messages",
            {"receiver_id": actor.id, "type": "system", "read": False},
        )

        return DoctorDashboardResponse(
            date=day,
            today=views,
            next_operation=next_operation,
            pending_tasks=count_pending_tasks(schedules, day),
            unread_alerts=unread_alerts,
        )
