"""Schedule adjustment advisory workflow."""

from medischedule.graphs.schedule_adjustment.graph import schedule_adjustment_graph
from medischedule.graphs.schedule_adjustment.state import ScheduleAdjustmentState

__all__ = ["schedule_adjustment_graph", "ScheduleAdjustmentState"]
