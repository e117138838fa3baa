from typing import Any, List, Literal, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

class CamelModel(BaseModel):
    """Snake-case attributes, camelCase JSON"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class ShortcutLink(CamelModel):
    id: int
    keywords: str
    url: str
    description: str
    created_at: str

class SuggestedLink(CamelModel):
    url: str
    description: str
    source: Literal["saved", "ai", "fallback"]

class ExternalTaskRef(CamelModel):
    title: Optional[str] = None

# Requests

class SuggestionRequest(CamelModel):
    # Any JSON value; unusable titles get the search fallback instead of a 422
    task_title: Any = None
    due_date: Any = None
    priority: Any = None
    user_location: Any = None

class SaveLinkRequest(CamelModel):
    # Optional here so missing fields reach the store and come back as 400
    keywords: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None

class PrioritizeRequest(CamelModel):
    task_title: Any = None
    # Only the list itself is required, entries are read leniently
    existing_tasks: List[Any]
    user_priority: Any = None

# Responses

class SuggestionResponse(CamelModel):
    links: List[SuggestedLink]

class SaveLinkResponse(CamelModel):
    success: bool = True
    link: ShortcutLink

class SavedLinksResponse(CamelModel):
    links: List[ShortcutLink]

class DeleteLinkResponse(CamelModel):
    success: bool = True

class PrioritizeResponse(CamelModel):
    position: int
