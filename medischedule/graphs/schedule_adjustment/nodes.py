"""LangGraph nodes for the schedule adjustment workflow."""

import asyncio
import json
import re
from typing import Any, Literal, Mapping

from langchain_core.exceptions import OutputParserException
from langchain_core.prompts import ChatPromptTemplate
from langchain_core.runnables import RunnableConfig
from pydantic import BaseModel, Field, ValidationError

from medischedule.config import settings
from medischedule.core.logging import logger
from medischedule.graphs.schedule_adjustment.state import ScheduleAdjustmentState


# ============ STRUCTURED OUTPUT SCHEMA FOR THE MODEL ============

class ScheduleAdjustmentOutput(BaseModel):
    """Schema for the model's structured output."""
    suggestedAdjustments: str = Field(description="Suggested schedule adjustments in JSON format")
    reasoning: str = Field(description="Reasoning behind the suggested adjustments")
    feasibility: bool = Field(description="Whether the adjustments are feasible given the constraints")


EVENT_SLOTS = {
    "new": "newEvent",
    "cancellation": "cancellation",
    "postponement": "postponement",
    "emergency": "emergency",
}

NO_DETAILS = "(none)"

SYSTEM_PROMPT = """You are an expert operating theater schedule optimizer.

You receive the current operating theater schedule, a change to it (a new
surgery, a cancellation, a postponement or an emergency) and the hospital's
constraints. Propose the best adjustments to the schedule.

Respect room availability, doctor working days and shift hours, equipment and
inventory, and the operating hours. Never place two operations in the same
room at overlapping times.

Return the adjustments as a JSON string in suggestedAdjustments, explain them
in reasoning, and set feasibility to false when the change cannot be
accommodated within the constraints."""

USER_PROMPT = """Current OT Schedule:
{currentSchedule}

New Event Details (if any):
{newEvent}

Cancellation Details (if any):
{cancellation}

Postponement Details (if any):
{postponement}

Emergency Details (if any):
{emergency}

Hospital Constraints:
{hospitalConstraints}"""

ADJUSTMENT_PROMPT = ChatPromptTemplate.from_messages([
    ("system", SYSTEM_PROMPT),
    ("human", USER_PROMPT),
])


def build_advisory_model():
    """Chat model bound to the structured output schema."""
    from langchain_openai import ChatOpenAI

    llm = ChatOpenAI(model=settings.ADVISORY_MODEL, api_key=settings.OPENAI_API_KEY)
    return llm.with_structured_output(ScheduleAdjustmentOutput)


def parse_json_text(text: str) -> Any:
    """
    Parse JSON that may be wrapped in markdown code fences.

    Raises:
        ValueError: If no JSON value can be found
    """
    if not text or not text.strip():
        raise ValueError("Empty text")

    # Strategy 1: Try parsing the text directly
    try:
        return json.loads(text.strip())
    except json.JSONDecodeError:
        pass
    except RecursionError:
        raise ValueError("JSON is nested too deeply")

    # Strategy 2: Remove markdown code blocks
    patterns = [
        r'```json\s*([\s\S]*?)\s*```',  # ```json ... ```
        r'```\s*([\s\S]*?)\s*```',       # ``` ... ```
    ]
    for pattern in patterns:
        match = re.search(pattern, text, re.IGNORECASE)
        if match:
            try:
                return json.loads(match.group(1).strip())
            except json.JSONDecodeError:
                continue
            except RecursionError:
                raise ValueError("JSON is nested too deeply")

    raise ValueError("Text is not valid JSON")


# ============ NODE 1: VALIDATE INPUT ============

def validate_input(state: ScheduleAdjustmentState) -> dict:
    """
    Reject blank events before any model call.
    """
    if not (state.get("event_details") or "").strip():
        return {
            "status": "failed",
            "error_kind": "validation",
            "message": "Event details are required",
        }

    if state.get("event_kind", "new") not in EVENT_SLOTS:
        return {
            "status": "failed",
            "error_kind": "validation",
            "message": f"Unknown event kind: {state.get('event_kind')}",
        }

    return {"status": "processing"}


# ============ NODE 2: CALL MODEL ============

async def call_model(state: ScheduleAdjustmentState, config: RunnableConfig) -> dict:
    """
    Ask the model for adjustments.

    The model comes from ``config["configurable"]["llm"]`` when given,
    otherwise the configured OpenAI model is used.
    """
    configurable = config.get("configurable", {})
    timeout = configurable.get("timeout", settings.ADVISORY_TIMEOUT_SECONDS)

    slots = {slot: NO_DETAILS for slot in EVENT_SLOTS.values()}
    slots[EVENT_SLOTS[state.get("event_kind", "new")]] = state["event_details"]
    messages = ADJUSTMENT_PROMPT.format_messages(
        currentSchedule=state.get("current_schedule") or "[]",
        hospitalConstraints=state.get("hospital_constraints") or "{}",
        **slots,
    )

    logger.info(f"Requesting schedule adjustment for a {state.get('event_kind', 'new')} event")

    try:
        llm = configurable.get("llm") or build_advisory_model()
        output = await asyncio.wait_for(llm.ainvoke(messages), timeout=timeout)
    except asyncio.TimeoutError:
        logger.error(f"Schedule adjustment model timed out after {timeout}s")
        return {
            "status": "failed",
            "error_kind": "remote",
            "message": f"Model did not answer within {timeout} seconds",
        }
    except (OutputParserException, ValidationError) as e:
        logger.warning(f"Model output failed the structured output schema: {e.__class__.__name__}")
        return {
            "status": "failed",
            "error_kind": "malformed",
            "message": "Model output does not match the expected schema",
            "raw": getattr(e, "llm_output", None) or str(e),
        }
    except Exception as e:
        logger.error(f"Schedule adjustment model call failed: {e}")
        return {
            "status": "failed",
            "error_kind": "remote",
            "message": str(e) or e.__class__.__name__,
        }

    if isinstance(output, BaseModel):
        output = output.model_dump()
    elif not isinstance(output, Mapping):
        # Plain chat message or text; parsed in the next node
        output = getattr(output, "content", output)

    logger.debug(f"Model output: {str(output)[:500]}")
    return {"output": output}


# ============ NODE 3: PARSE SUGGESTION ============

def parse_suggestion(state: ScheduleAdjustmentState) -> dict:
    """
    Re-validate the model output and parse the suggested adjustments.
    """
    output = state.get("output")

    if isinstance(output, str):
        raw = output
        try:
            output = parse_json_text(output)
        except ValueError:
            logger.warning("Model output is not JSON")
            return {
                "status": "failed",
                "error_kind": "malformed",
                "message": "Model output is not valid JSON",
                "raw": raw,
            }

    try:
        suggestion = ScheduleAdjustmentOutput.model_validate(output)
    except ValidationError as e:
        logger.warning(f"Model output failed validation: {e.error_count()} error(s)")
        return {
            "status": "failed",
            "error_kind": "malformed",
            "message": "Model output does not match the expected schema",
            "raw": json.dumps(output, default=str),
        }

    result = suggestion.model_dump()
    try:
        adjustments = parse_json_text(suggestion.suggestedAdjustments)
    except ValueError:
        logger.warning("Suggested adjustments are not JSON")
        return {
            "status": "failed",
            "error_kind": "malformed",
            "message": "Suggested adjustments are not valid JSON",
            "result": result,
            "raw": suggestion.suggestedAdjustments,
        }

    logger.info(f"Schedule adjustment parsed, feasible={suggestion.feasibility}")
    return {
        "status": "completed",
        "result": result,
        "adjustments": adjustments,
        "raw": suggestion.suggestedAdjustments,
    }


# ============ ROUTING FUNCTIONS ============

def route_after_validation(state: ScheduleAdjustmentState) -> Literal["call_model", "end"]:
    """Skip the model when the input was rejected."""
    if state.get("status") == "failed":
        return "end"
    return "call_model"


def route_after_model(state: ScheduleAdjustmentState) -> Literal["parse_suggestion", "end"]:
    """Skip parsing when the model call failed."""
    if state.get("status") == "failed":
        return "end"
    return "parse_suggestion"
