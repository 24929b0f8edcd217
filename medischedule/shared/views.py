"""
Read-side joins.

Collections are fetched independently and combined in memory; there are no
server-side joins. References are soft, so every lookup has a fallback and
no row is ever dropped because its patient, doctor or room is gone.
"""

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple


UNKNOWN_PATIENT = "Unknown Patient"
UNKNOWN_DOCTOR = "Unknown Doctor"


def _as_dict(record: Any) -> Dict[str, Any]:
    if isinstance(record, Mapping):
        return dict(record)
    return record.model_dump()


def build_name_map(records: Iterable[Any], label: str = "name") -> Dict[str, str]:
    """Map record id to its display label."""
    names = {}
    for record in records:
        data = _as_dict(record)
        if data.get("id") is not None:
            names[data["id"]] = data.get(label) or data["id"]
    return names


def assemble_schedule_views(
    schedules: Sequence[Any],
    patients: Sequence[Any],
    doctors: Sequence[Any],
    rooms: Sequence[Any] = (),
) -> List[Dict[str, Any]]:
    """Attach patientName, doctorName and roomNumber to each schedule."""
    patient_names = build_name_map(patients)
    doctor_names = build_name_map(doctors)
    room_numbers = build_name_map(rooms, label="room_number")

    views = []
    for schedule in schedules:
        view = _as_dict(schedule)
        view["patientName"] = patient_names.get(view.get("patient_id"), UNKNOWN_PATIENT)
        view["doctorName"] = doctor_names.get(view.get("doctor_id"), UNKNOWN_DOCTOR)
        view["roomNumber"] = room_numbers.get(view.get("ot_id"), view.get("ot_id"))
        views.append(view)
    return views


def assemble_request_views(
    requests: Sequence[Any],
    patients: Sequence[Any],
    doctors: Sequence[Any],
) -> List[Dict[str, Any]]:
    """Attach patientName and doctorName to each surgery request."""
    patient_names = build_name_map(patients)
    doctor_names = build_name_map(doctors)

    views = []
    for request in requests:
        view = _as_dict(request)
        view["patientName"] = patient_names.get(view.get("patient_id"), UNKNOWN_PATIENT)
        view["doctorName"] = doctor_names.get(view.get("requesting_doctor_id"), UNKNOWN_DOCTOR)
        views.append(view)
    return views


class ViewCache:
    """
    Memoizes a join on the identity of its input lists.

    A new result is computed only when at least one input is a different
    object from the previous call; equal-but-new lists still recompute.
    """

    def __init__(self, assemble: Callable[..., List[Dict[str, Any]]]):
        self.assemble = assemble
        self.computations = 0
        self._inputs: Optional[Tuple[Any, ...]] = None
        self._result: Optional[List[Dict[str, Any]]] = None

    def __call__(self, *inputs: Sequence[Any]) -> List[Dict[str, Any]]:
        if self._inputs is not None and len(inputs) == len(self._inputs) and all(
            new is old for new, old in zip(inputs, self._inputs)
        ):
            return self._result

        self._result = self.assemble(*inputs)
        self._inputs = inputs
        self.computations += 1
        return self._result
