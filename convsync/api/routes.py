"""HTTP handlers for the current conversation, saved conversations and capture gates."""

from __future__ import annotations

import json

from aiohttp import web
from pydantic import BaseModel, ValidationError

from convsync.conversations import ConversationStore, make_title
from convsync.sync.engine import SyncEngine
from convsync.utils.logging import get_logger

log = get_logger(__name__)

ENGINE_KEY = web.AppKey("engine", SyncEngine)
STORE_KEY = web.AppKey("store", ConversationStore)


class StateUpdate(BaseModel):
    audio_enabled: bool | None = None
    sleeping: bool | None = None


class ConversationEdit(BaseModel):
    text: str
    title: str | None = None


async def _read_json(request: web.Request, model: type[BaseModel]) -> BaseModel:
    try:
        payload = await request.json()
        return model.model_validate(payload)
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as exc:
        raise web.HTTPBadRequest(text=str(exc)) from exc


def _dump(record) -> dict:
    return record.model_dump(mode="json")


async def health_check(request: web.Request) -> web.Response:
    return web.Response(text="ok")


async def get_state(request: web.Request) -> web.Response:
    return web.json_response(request.app[ENGINE_KEY].snapshot())


async def update_state(request: web.Request) -> web.Response:
    """POST /state: toggle audio capture and sleep mode."""
    engine = request.app[ENGINE_KEY]
    update = await _read_json(request, StateUpdate)
    if update.audio_enabled is not None:
        engine.set_audio_enabled(update.audio_enabled)
    if update.sleeping is not None:
        engine.set_sleeping(update.sleeping)
    return web.json_response(engine.snapshot())


async def get_current_conversation(request: web.Request) -> web.Response:
    """GET /conversation/current?order=latest|chronological"""
    order = request.query.get("order", "latest")
    if order not in ("latest", "chronological"):
        raise web.HTTPBadRequest(text=f"unknown order: {order}")
    engine = request.app[ENGINE_KEY]
    return web.json_response(
        {
            "order": order,
            "text": engine.current_conversation(latest_first=order == "latest"),
            "parts": list(engine.session.buffer),
        }
    )


async def save_conversation(request: web.Request) -> web.Response:
    """POST /conversation/save: finalize the current conversation now."""
    record = request.app[ENGINE_KEY].save()
    log.info("conversation_saved_by_request", conversation_id=record.id)
    return web.json_response(_dump(record), status=201)


async def list_conversations(request: web.Request) -> web.Response:
    query = request.query.get("q", "")
    records = request.app[STORE_KEY].search(query)
    return web.json_response([_dump(r) for r in records])


async def update_conversation(request: web.Request) -> web.Response:
    store = request.app[STORE_KEY]
    conversation_id = request.match_info["conversation_id"]
    existing = store.get(conversation_id)
    if existing is None:
        raise web.HTTPNotFound(text="conversation not found")

    edit = await _read_json(request, ConversationEdit)
    record = existing.model_copy(
        update={"text": edit.text, "title": edit.title or make_title(edit.text)}
    )
    request.app[ENGINE_KEY].update_conversation(record)
    return web.json_response(_dump(record))


async def delete_conversation(request: web.Request) -> web.Response:
    store = request.app[STORE_KEY]
    conversation_id = request.match_info["conversation_id"]
    if store.get(conversation_id) is None:
        raise web.HTTPNotFound(text="conversation not found")
    request.app[ENGINE_KEY].delete_conversation(conversation_id)
    return web.Response(status=204)


def add_routes(app: web.Application) -> None:
    app.router.add_get("/health", health_check)
    app.router.add_get("/state", get_state)
    app.router.add_post("/state", update_state)
    app.router.add_get("/conversation/current", get_current_conversation)
    app.router.add_post("/conversation/save", save_conversation)
    app.router.add_get("/conversations", list_conversations)
    app.router.add_put("/conversations/{conversation_id}", update_conversation)
    app.router.add_delete("/conversations/{conversation_id}", delete_conversation)
