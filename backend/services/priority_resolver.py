import logging
import re
from typing import Any, Optional, Sequence
from models.schemas import ExternalTaskRef
from .completion_service import CompletionService
from .errors import CompletionParseError, ExternalServiceError

logger = logging.getLogger(__name__)

LEADING_INTEGER = re.compile(r"[+-]?\d+")

def task_title_of(task: Any) -> str:
    """Title of a caller-supplied task: a dict, an ExternalTaskRef, or any other value as text"""
    if task is None:
        raise ValueError("Task list contains an empty entry")
    if isinstance(task, ExternalTaskRef):
        title = task.title
    elif isinstance(task, dict):
        title = task.get("title")
    else:
        return str(task)
    return "" if title is None else str(title)

def build_priority_prompt(
    task_title: Optional[str],
    existing_tasks: Sequence[Any],
    user_priority: Optional[str] = None,
) -> str:
    task_list = "\n".join(f"{idx}. {task_title_of(task)}" for idx, task in enumerate(existing_tasks, start=1))
    priority_text = (
        f"User specified priority: {user_priority}"
        if user_priority else "User did not specify priority - use your judgment"
    )

    return f"""You are helping prioritize a task list.

New task: "{task_title or ''}"
{priority_text}

Existing tasks (in current priority order):
{task_list or 'No existing tasks'}

Return ONLY a single number indicating where this new task should be inserted (1 = highest priority, {len(existing_tasks) + 1} = lowest priority).

Consider:
- Urgency (deadlines, time-sensitive matters like bills, appointments)
- Importance (impact on life, health, finances, relationships)
- Dependencies (tasks that block other tasks)
- User's specified priority if provided (but you can override if it seems clearly wrong)

Return ONLY the number, nothing else."""

def parse_position(text: str) -> int:
    """Leading integer of the reply ("2." and "3 because..." both parse)"""
    match = LEADING_INTEGER.match(text.strip())
    if not match:
        raise CompletionParseError(f"Reply is not a number: {text[:40]!r}")
    return int(match.group())

def clamp_position(position: int, task_count: int) -> int:
    return min(max(position, 1), task_count + 1)

async def resolve_priority(
    task_title: Optional[str],
    existing_tasks: Sequence[Any],
    completion: CompletionService,
    user_priority: Optional[str] = None,
) -> int:
    """Insertion position for a new task, 1 = top of the list.

    Falls back to the end of the list whenever the completion service
    fails or its reply cannot be read as a number.
    """
    end_of_list = len(existing_tasks) + 1

    try:
        prompt = build_priority_prompt(task_title, existing_tasks, user_priority)
        reply = await completion.generate(prompt)
        position = clamp_position(parse_position(reply), len(existing_tasks))
        logger.info(f"Placing '{task_title}' at position {position} of {end_of_list}")
        return position
    except ExternalServiceError as e:
        logger.error(f"Error prioritizing task '{task_title}': {e}")
    except ValueError as e:
        logger.warning(f"Unusable task list for '{task_title}': {e}")
    except Exception as e:
        logger.exception(f"Unexpected error prioritizing task '{task_title}': {e}")

    return end_of_list
