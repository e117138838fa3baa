from fastapi import APIRouter, Depends, Request
from models.schemas import (
    DeleteLinkResponse,
    PrioritizeRequest,
    PrioritizeResponse,
    SaveLinkRequest,
    SaveLinkResponse,
    SavedLinksResponse,
    SuggestionRequest,
    SuggestionResponse,
)
from services.completion_service import CompletionService
from services.errors import LinkNotFoundError
from services.link_store import LinkStore
from services.priority_resolver import resolve_priority
from services.suggestion_resolver import resolve_suggestions

router = APIRouter()

def get_link_store(request: Request) -> LinkStore:
    return request.app.state.link_store

def get_completion_service(request: Request) -> CompletionService:
    return request.app.state.completion_service

@router.post("/get-suggestion", response_model=SuggestionResponse)
async def get_suggestion(
    request: SuggestionRequest,
    store: LinkStore = Depends(get_link_store),
    completion: CompletionService = Depends(get_completion_service),
):
    links = await resolve_suggestions(
        request.task_title,
        store,
        completion,
        due_date=request.due_date,
        priority=request.priority,
        user_location=request.user_location,
    )
    return SuggestionResponse(links=links)

@router.post("/save-link", response_model=SaveLinkResponse)
async def save_link(request: SaveLinkRequest, store: LinkStore = Depends(get_link_store)):
    link = store.add(request.keywords, request.url, request.description)
    return SaveLinkResponse(link=link)

@router.get("/saved-links", response_model=SavedLinksResponse)
async def get_saved_links(store: LinkStore = Depends(get_link_store)):
    return SavedLinksResponse(links=store.list())

@router.delete("/saved-links/{link_id}", response_model=DeleteLinkResponse)
async def delete_saved_link(link_id: int, store: LinkStore = Depends(get_link_store)):
    if not store.remove(link_id):
        raise LinkNotFoundError("Link not found")
    return DeleteLinkResponse()

@router.post("/prioritize-task", response_model=PrioritizeResponse)
async def prioritize_task(
    request: PrioritizeRequest,
    completion: CompletionService = Depends(get_completion_service),
):
    position = await resolve_priority(
        request.task_title,
        request.existing_tasks,
        completion,
        user_priority=request.user_priority,
    )
    return PrioritizeResponse(position=position)

@router.get("/health")
async def health_check():
    return {"status": "healthy"}
