import logging
from contextlib import asynccontextmanager
from typing import Dict, List, Optional

import httpx
import redis.asyncio as redis
import uvicorn
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, Response, Security
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security.api_key import APIKeyHeader
from pydantic import ValidationError

from config import settings
from drafts import DraftController
from grouping import group_by_frequency
from models import (
    DraftPatch,
    DraftState,
    Frequency,
    Practice,
    PracticeDraft,
    SuggestionResponse,
)
from storage import KeyValueClient, PersistenceAdapter
from store import PracticeStore
from suggestions import SuggestionClient

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Auth
# ------------------------------------------------------------------
api_key_header = APIKeyHeader(name="x-api-key", auto_error=False)


async def verify_api_key(api_key: Optional[str] = Security(api_key_header)):
    if settings.X_API_KEY and api_key != settings.X_API_KEY:
        raise HTTPException(status_code=403, detail="Unauthorized access")


# ------------------------------------------------------------------
# Dependencies
# ------------------------------------------------------------------
def get_store(request: Request) -> PracticeStore:
    return request.app.state.store


def get_drafts(request: Request) -> DraftController:
    return request.app.state.drafts


def get_suggestions(request: Request) -> SuggestionClient:
    return request.app.state.suggestions


def _require_practice(store: PracticeStore, practice_id: int) -> Practice:
    practice = store.get(practice_id)
    if practice is None:
        raise HTTPException(status_code=404, detail=f"Practice {practice_id} not found")
    return practice


def _unprocessable(error: ValidationError) -> HTTPException:
    return HTTPException(
        status_code=422, detail=error.errors(include_url=False, include_context=False)
    )


# ------------------------------------------------------------------
# App Factory
# ------------------------------------------------------------------
def create_app(
    kv_client: Optional[KeyValueClient] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logging.basicConfig(
            level=settings.LOG_LEVEL,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        owned_client = None
        client = kv_client
        if client is None:
            owned_client = redis.from_url(settings.REDIS_URL, decode_responses=True)
            client = owned_client

        store = PracticeStore(PersistenceAdapter(client, settings.STORAGE_KEY))
        await store.load()

        app.state.store = store
        app.state.drafts = DraftController(store)
        app.state.suggestions = SuggestionClient(settings, http_client=http_client)
        yield

        if owned_client is not None:
            await owned_client.aclose()

    app = FastAPI(title="MISHMAR", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"]
    )
    app.include_router(_build_router())

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.error(f"CRITICAL ERROR on {request.url.path}: {str(exc)}", exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Internal error"})

    return app


def _build_router() -> APIRouter:
    router = APIRouter(prefix="/v1", dependencies=[Depends(verify_api_key)])

    # -------------------------- Practices --------------------------
    @router.get("/practices", response_model=List[Practice])
    async def list_practices(store: PracticeStore = Depends(get_store)):
        return store.list()

    @router.get("/practices/grouped", response_model=Dict[Frequency, List[Practice]])
    async def grouped_practices(store: PracticeStore = Depends(get_store)):
        return group_by_frequency(store.list())

    @router.get("/practices/{practice_id}", response_model=Practice)
    async def get_practice(practice_id: int, store: PracticeStore = Depends(get_store)):
        return _require_practice(store, practice_id)

    @router.post("/practices", response_model=Practice, status_code=201)
    async def create_practice(
        record: PracticeDraft, store: PracticeStore = Depends(get_store)
    ):
        try:
            return await store.add(record)
        except ValidationError as e:
            raise _unprocessable(e)

    @router.put("/practices/{practice_id}", response_model=Practice)
    async def update_practice(
        practice_id: int,
        record: PracticeDraft,
        store: PracticeStore = Depends(get_store),
    ):
        _require_practice(store, practice_id)
        try:
            practice = await store.update(practice_id, record)
        except ValidationError as e:
            raise _unprocessable(e)
        if practice is None:
            raise HTTPException(status_code=404, detail=f"Practice {practice_id} not found")
        return practice

    @router.delete("/practices/{practice_id}", status_code=204)
    async def delete_practice(practice_id: int, store: PracticeStore = Depends(get_store)):
        await store.remove(practice_id)
        return Response(status_code=204)

    # ---------------------------- Draft ----------------------------
    @router.get("/draft", response_model=DraftState)
    async def get_draft(drafts: DraftController = Depends(get_drafts)):
        return drafts.state()

    @router.post("/draft", response_model=DraftState)
    async def start_draft(drafts: DraftController = Depends(get_drafts)):
        drafts.start_create()
        return drafts.state()

    @router.post("/draft/edit/{practice_id}", response_model=DraftState)
    async def edit_draft(
        practice_id: int,
        store: PracticeStore = Depends(get_store),
        drafts: DraftController = Depends(get_drafts),
    ):
        drafts.start_edit(_require_practice(store, practice_id))
        return drafts.state()

    @router.patch("/draft", response_model=DraftState)
    async def patch_draft(patch: DraftPatch, drafts: DraftController = Depends(get_drafts)):
        try:
            drafts.update_fields(**patch.model_dump(exclude_unset=True))
        except ValidationError as e:
            raise _unprocessable(e)
        return drafts.state()

    @router.post("/draft/commit", response_model=Optional[Practice])
    async def commit_draft(drafts: DraftController = Depends(get_drafts)):
        # Blank names are ignored and answered with null
        return await drafts.commit()

    @router.delete("/draft", response_model=DraftState)
    async def cancel_draft(drafts: DraftController = Depends(get_drafts)):
        drafts.cancel()
        return drafts.state()

    # ------------------------- Suggestion --------------------------
    @router.post("/suggestion", response_model=SuggestionResponse)
    async def get_suggestion(
        store: PracticeStore = Depends(get_store),
        suggestions: SuggestionClient = Depends(get_suggestions),
    ):
        if suggestions.busy:
            raise HTTPException(status_code=409, detail="Suggestion already in progress")
        suggestion = await suggestions.suggest(store.list())
        if suggestion is None:
            raise HTTPException(status_code=409, detail="Suggestion already in progress")
        return SuggestionResponse(suggestion=suggestion)

    return router


app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=settings.PORT, reload=True)
