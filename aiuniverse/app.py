from __future__ import annotations

import os
import time

from fastapi import Depends, FastAPI, HTTPException, Request
from starlette.middleware.sessions import SessionMiddleware

from .analytics.aggregator import compute_analytics
from .analytics.store import EventType, get_events, record_event
from .auth.dependencies import (
    get_current_user,
    require_admin,
    require_feature,
    require_user,
    user_tier,
)
from .auth.models import LoginRequest
from .auth.users import authenticate
from .catalog.cache import cached_fetch_published_tools, get_cache_stats
from .catalog.data_store import fetch_categories
from .catalog.models import (
    CompareRequest,
    CompareResponse,
    PricingType,
    ToolListResponse,
    ToolRecord,
)
from .chat.assistant import clean_markdown, run_turn
from .chat.handlers import GREETING_MESSAGE, render_comparison
from .chat.intent import derive_requirements
from .chat.models import ChatHistoryResponse, ChatMessage, ChatRequest, ChatResponse
from .chat.sessions import (
    get_history,
    new_session_id,
    reset_history,
    save_history,
    session_lock,
)
from .entitlements.models import EntitlementPolicy, Feature, FavoriteLimit
from .entitlements.policy import POLICIES, cap_visible, check_favorite_limit, resolve_policy
from .favorites.models import FavoriteOut, FavoriteRequest, FavoriteResult
from .favorites.store import (
    add_favorite,
    count_favorites,
    get_user_favorites,
    remove_favorite,
)
from .llm.groq_client import compare_tools

app = FastAPI(title="AI Universe API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "ai-universe-secret-change-in-production"),
)


def _tools_by_id() -> dict[str, ToolRecord]:
    return {t.id: t for t in cached_fetch_published_tools()}


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata")
def metadata() -> dict:
    return {
        "categories": [c.name for c in fetch_categories()],
        "pricing_types": [p.value for p in PricingType],
    }


@app.get("/plans")
def plans() -> dict[str, EntitlementPolicy]:
    return {tier.value: policy for tier, policy in POLICIES.items()}


@app.get("/tools", response_model=ToolListResponse)
def list_tools(request: Request, pricing: PricingType | None = None) -> ToolListResponse:
    # Anonymous visitors browse with the free plan's limits
    policy = resolve_policy(user_tier(get_current_user(request)))
    tools = cached_fetch_published_tools()
    if pricing:
        tools = [t for t in tools if t.pricing_type == pricing]
    return ToolListResponse(
        tools=cap_visible(tools, policy.max_tools_visible),
        total_published=len(tools),
        visible_limit=policy.max_tools_visible,
    )


@app.get("/tools/{tool_id}", response_model=ToolRecord)
def tool_detail(tool_id: str) -> ToolRecord:
    tool = _tools_by_id().get(tool_id)
    if tool is None:
        raise HTTPException(status_code=404, detail="Tool not found")
    return tool


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/login")
def login(body: LoginRequest, request: Request) -> dict:
    user = authenticate(body.username, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    # A new login starts a new conversation; drop the old transcript with it
    chat_id = request.session.get("chat_session_id")
    if chat_id:
        reset_history(chat_id)
    request.session.clear()
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
def logout(request: Request) -> dict:
    chat_id = request.session.get("chat_session_id")
    if chat_id:
        reset_history(chat_id)
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/auth/me")
def auth_me(user: dict = Depends(require_user)) -> dict:
    return {**user, "policy": resolve_policy(user_tier(user)).model_dump(mode="json")}


@app.get("/entitlements", response_model=EntitlementPolicy)
def entitlements(user: dict = Depends(require_user)) -> EntitlementPolicy:
    return resolve_policy(user_tier(user))


# ── Favorites ────────────────────────────────────────────────────────────


@app.get("/favorites", response_model=list[FavoriteOut])
def favorites(user: dict = Depends(require_user)) -> list[FavoriteOut]:
    tools = _tools_by_id()
    out: list[FavoriteOut] = []
    for fav in get_user_favorites(user["username"]):
        tool = tools.get(fav["tool_id"])
        out.append(FavoriteOut(
            tool_id=fav["tool_id"],
            created_at=fav["created_at"],
            name=tool.name if tool else None,
        ))
    return out


@app.get("/favorites/limit", response_model=FavoriteLimit)
def favorite_limit(user: dict = Depends(require_user)) -> FavoriteLimit:
    return check_favorite_limit(user_tier(user), count_favorites(user["username"]))


@app.post("/favorites", response_model=FavoriteResult)
def favorite_add(body: FavoriteRequest, user: dict = Depends(require_user)) -> FavoriteResult:
    if body.tool_id not in _tools_by_id():
        raise HTTPException(status_code=404, detail="Tool not found")

    tier = user_tier(user)
    result = add_favorite(user["username"], body.tool_id, tier)

    record_event(EventType.favorite, {
        "tier": tier.value,
        "success": result.success,
        "limited": result.limited,
    })
    return result


@app.delete("/favorites/{tool_id}", response_model=FavoriteResult)
def favorite_remove(tool_id: str, user: dict = Depends(require_user)) -> FavoriteResult:
    return remove_favorite(user["username"], tool_id)


# ── Compare ──────────────────────────────────────────────────────────────


@app.post("/compare", response_model=CompareResponse)
def compare(
    body: CompareRequest,
    user: dict = Depends(require_feature(Feature.compare)),
) -> CompareResponse:
    catalog = _tools_by_id()
    missing = [tid for tid in body.tool_ids if tid not in catalog]
    if missing:
        raise HTTPException(status_code=404, detail=f"Unknown tools: {', '.join(missing)}")

    tools = [catalog[tid] for tid in dict.fromkeys(body.tool_ids)]
    if len(tools) < 2:
        raise HTTPException(status_code=422, detail="Pick at least two different tools")

    analysis = compare_tools(tools, body.question)
    generated_by = "llm"
    if analysis is None:
        analysis = clean_markdown(render_comparison(tools))
        generated_by = "rules"

    record_event(EventType.compare, {
        "tool_ids": [t.id for t in tools],
        "llm": generated_by == "llm",
        "has_question": bool(body.question),
    })
    return CompareResponse(tools=tools, analysis=analysis, generated_by=generated_by)


# ── AI Select chat ───────────────────────────────────────────────────────


def _chat_session_id(request: Request) -> str:
    chat_id = request.session.get("chat_session_id")
    if not chat_id:
        chat_id = new_session_id()
        request.session["chat_session_id"] = chat_id
    return chat_id


def _load_transcript(chat_id: str) -> list[ChatMessage]:
    history = get_history(chat_id)
    if not history:
        history = [ChatMessage(role="assistant", content=clean_markdown(GREETING_MESSAGE))]
    return history


@app.get("/chat/history", response_model=ChatHistoryResponse)
def chat_history(
    request: Request,
    user: dict = Depends(require_feature(Feature.recommendation_chat)),
) -> ChatHistoryResponse:
    return ChatHistoryResponse(messages=_load_transcript(_chat_session_id(request)))


@app.post("/chat", response_model=ChatResponse)
def chat(
    body: ChatRequest,
    request: Request,
    user: dict = Depends(require_feature(Feature.recommendation_chat)),
) -> ChatResponse:
    chat_id = _chat_session_id(request)

    # 1. One turn at a time per conversation
    with session_lock(chat_id):
        history = _load_transcript(chat_id)
        history.append(ChatMessage(role="user", content=body.message))

        # 2. Requirements are rebuilt from the whole transcript every turn
        requirements = derive_requirements(history)

        # 3. Classify, dispatch and render
        start_time = time.time()
        result = run_turn(history, requirements, fetch_tools=cached_fetch_published_tools)
        elapsed_ms = round((time.time() - start_time) * 1000, 1)

        history.append(ChatMessage(role="assistant", content=result.message))
        save_history(chat_id, history)

    # 4. Record analytics event
    record_event(EventType.chat_turn, {
        "session_id": chat_id,
        "intent": result.intent.value,
        "failed": result.failed,
        "budget": requirements.budget,
        "industry": requirements.industry,
        "team_size": requirements.team_size,
        "response_time_ms": elapsed_ms,
    })

    return ChatResponse(
        message=result.message,
        intent=result.intent,
        requirements=requirements,
        history_length=len(history),
    )


@app.post("/chat/reset")
def chat_reset(
    request: Request,
    user: dict = Depends(require_feature(Feature.recommendation_chat)),
) -> dict:
    reset_history(_chat_session_id(request))
    return {"status": "reset"}


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/analytics")
def analytics(user: dict = Depends(require_admin)) -> dict:
    return compute_analytics(get_events())


@app.get("/cache/stats")
def cache_stats(user: dict = Depends(require_admin)) -> dict:
    return get_cache_stats()
