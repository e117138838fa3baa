import json
import logging
import re
from typing import Any, List, Optional
from urllib.parse import quote
from config import settings
from models.schemas import SuggestedLink
from .completion_service import CompletionService
from .errors import CompletionParseError, ExternalServiceError
from .keyword_matcher import find_matching_links
from .link_store import LinkStore

logger = logging.getLogger(__name__)

CODE_FENCE = re.compile(r"```(?:json)?\n?")

def build_suggestion_prompt(
    task_title: str,
    user_location: Optional[str] = None,
    due_date: Optional[str] = None,
    priority: Optional[str] = None,
) -> str:
    location_text = f"User location: {user_location or settings.default_location}"
    context_lines = [location_text]
    if due_date:
        context_lines.append(f"Due date: {due_date}")
    if priority:
        context_lines.append(f"Priority: {priority}")
    context = "\n".join(context_lines)

    return f"""For the task "{task_title}", provide up to 3 actionable web links that would help complete this task.

{context}

LANGUAGE INSTRUCTION:
- Detect the language of the task text: "{task_title}"
- Write descriptions in THE SAME language as the task
- If task is in Hebrew → Hebrew descriptions and prefer Hebrew/Israeli sites
- If task is in English → English descriptions and international/English sites
- DO NOT assume language based on location - only based on the task text itself

Return ONLY a JSON array with this exact format (no additional text):
[
  {{
    "url": "https://example.com",
    "description": "SITE NAME: Brief action (e.g., Zara: Shop online, Renault: Book service)"
  }}
]

Rules:
- ALWAYS include the website/company name in the description
- Format: "Site Name: What you can do there"
- Keep descriptions short (max 6-8 words total)
- Match the language of the task text
- Consider the user's location for relevant local options
- Provide direct, actionable links
- If uncertain, provide a Google search link as fallback
- Provide 1-3 links maximum
- Return valid JSON only, no markdown, no additional text"""

def strip_code_fences(text: str) -> str:
    return CODE_FENCE.sub("", text).strip()

def parse_ai_links(text: str, limit: int) -> List[SuggestedLink]:
    """Parse the model's JSON array into links tagged as AI suggestions.

    Entries without a usable url are dropped. Raises CompletionParseError
    when nothing usable is left.
    """
    try:
        data = json.loads(strip_code_fences(text))
    except json.JSONDecodeError as e:
        raise CompletionParseError(f"Reply is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise CompletionParseError(f"Expected a JSON array, got {type(data).__name__}")

    links = []
    for entry in data:
        if not isinstance(entry, dict):
            continue
        url = entry.get("url")
        if not isinstance(url, str) or not url.strip():
            continue
        description = entry.get("description")
        links.append(SuggestedLink(
            url=url.strip(),
            description=description if isinstance(description, str) else "",
            source="ai"
        ))

    if not links:
        raise CompletionParseError("Reply contained no usable links")
    return links[:limit]

def fallback_links(task_title: Any) -> List[SuggestedLink]:
    """Single Google search link for the raw task title"""
    search_query = quote("" if task_title is None else str(task_title), safe="-_.!~*'()")
    return [SuggestedLink(
        url=f"{settings.search_url}{search_query}",
        description="Search on Google",
        source="fallback"
    )]

async def resolve_suggestions(
    task_title: Any,
    store: LinkStore,
    completion: CompletionService,
    due_date: Optional[str] = None,
    priority: Optional[str] = None,
    user_location: Optional[str] = None,
) -> List[SuggestedLink]:
    """Saved shortcuts first, then the completion service, then a search link"""
    limit = settings.max_suggestions

    if not isinstance(task_title, str) or not task_title.strip():
        logger.warning(f"Suggestion requested without a usable task title ({task_title!r}), using fallback")
        return fallback_links(task_title)

    matches = find_matching_links(task_title, store.list())
    if matches:
        logger.info(f"Found {len(matches)} saved link(s) for '{task_title}'")
        return [
            SuggestedLink(url=link.url, description=link.description, source="saved")
            for link in matches[:limit]
        ]

    try:
        prompt = build_suggestion_prompt(task_title, user_location, due_date, priority)
        reply = await completion.generate(prompt)
        links = parse_ai_links(reply, limit)
        logger.info(f"Completion service suggested {len(links)} link(s) for '{task_title}'")
        return links
    except ExternalServiceError as e:
        logger.error(f"Error getting AI suggestions for '{task_title}': {e}")
    except Exception as e:
        logger.exception(f"Unexpected error getting AI suggestions for '{task_title}': {e}")

    return fallback_links(task_title)
