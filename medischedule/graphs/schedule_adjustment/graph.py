"""LangGraph workflow definition for schedule adjustment advice."""

from langgraph.graph import StateGraph, START, END

from medischedule.graphs.schedule_adjustment.state import ScheduleAdjustmentState
from medischedule.graphs.schedule_adjustment.nodes import (
    validate_input,
    call_model,
    parse_suggestion,
    route_after_validation,
    route_after_model,
)


def build_schedule_adjustment_graph() -> StateGraph:
    """Build the schedule adjustment workflow graph."""
    
    # Create the graph
    graph = StateGraph(ScheduleAdjustmentState)
    
    # Add all nodes
    graph.add_node("validate_input", validate_input)
    graph.add_node("call_model", call_model)
    graph.add_node("parse_suggestion", parse_suggestion)
    
    # Start -> Validate Input
    graph.add_edge(START, "validate_input")
    
    # Validate Input -> (Call Model | End)
    graph.add_conditional_edges(
        "validate_input",
        route_after_validation,
        {
            "call_model": "call_model",
            "end": END,
        }
    )
    
    # Call Model -> (Parse Suggestion | End)
    graph.add_conditional_edges(
        "call_model",
        route_after_model,
        {
            "parse_suggestion": "parse_suggestion",
            "end": END,
        }
    )
    
    graph.add_edge("parse_suggestion", END)
    
    return graph


# Create and compile the graph
schedule_adjustment_graph = build_schedule_adjustment_graph().compile()
