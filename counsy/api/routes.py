"""API routes for the Counsy wellness app"""
import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, Query, Request, Response, status

from counsy.api.models import (
    StreakSummary, UnlockedAchievement,
    MoodLogRequest, MoodLogResponse, MoodListResponse,
    JournalCreateRequest, JournalSaveResponse, JournalListResponse, JournalAnalyzeRequest,
    ChatRequest, ChatResponse, ChatHistoryResponse,
    FocusSessionRequest, ActivityResponse, StreakResponse, AchievementResponse,
    ProfileCreateRequest, ProfileUpdateRequest, ProfileResponse, UsernameAvailabilityResponse,
    HealthCheckResponse,
)
from counsy.api.auth import verify_api_key
from counsy.api.dependencies import get_container
from counsy.api.middleware import (
    limiter, AI_RATE_LIMIT, WRITE_RATE_LIMIT, READ_RATE_LIMIT, MONITORING_RATE_LIMIT,
)
from counsy.gamification import format_streak_display
from counsy.i18n.translations import t
from counsy.models.journal import JournalAnalysis
from counsy.services.container import ServiceContainer

logger = logging.getLogger(__name__)

router = APIRouter()

USER_PREFIX = "/api/v1/users/{user_id}"


# ==========================================
# Moods
# ==========================================

@router.post(f"{USER_PREFIX}/moods", response_model=MoodLogResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(WRITE_RATE_LIMIT)
async def log_mood(
    request: Request,
    user_id: str,
    payload: MoodLogRequest,
    api_key: str = Depends(verify_api_key),
    container: ServiceContainer = Depends(get_container)
):
    """
    Log a mood with an AI insight

    Counts toward the mood streak and the overall streak.
    Rate limit: 20 requests per minute (each call asks the AI for an insight)
    """
    result = await container.mood_service.log_mood(user_id, payload.mood, note=payload.note, lang=payload.lang)

    return MoodLogResponse(
        entry=result.entry,
        streak=StreakSummary.from_state(result.streak),
        achievements_unlocked=[UnlockedAchievement.from_definition(a) for a in result.achievements_unlocked],
    )


@router.get(f"{USER_PREFIX}/moods", response_model=MoodListResponse)
@limiter.limit(READ_RATE_LIMIT)
async def list_moods(
    request: Request,
    user_id: str,
    limit: int = Query(default=100, ge=1, le=500),
    api_key: str = Depends(verify_api_key),
    container: ServiceContainer = Depends(get_container)
):
    """Mood history, newest first"""
    entries = await container.mood_service.get_mood_history(user_id, limit=limit)
    return MoodListResponse(user_id=user_id, entries=entries)


# ==========================================
# Journals
# ==========================================

@router.post(f"{USER_PREFIX}/journals", response_model=JournalSaveResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(WRITE_RATE_LIMIT)
async def create_journal_entry(
    request: Request,
    user_id: str,
    payload: JournalCreateRequest,
    api_key: str = Depends(verify_api_key),
    container: ServiceContainer = Depends(get_container)
):
    """
    Save a journal entry

    Counts toward the journal streak and the overall streak.
    """
    result = await container.journal_service.save_entry(
        user_id,
        payload.content,
        payload.mood,
        tags=payload.tags,
        is_locked=payload.is_locked,
        analyze=payload.analyze,
        lang=payload.lang,
    )

    return JournalSaveResponse(
        entry=result.entry,
        streak=StreakSummary.from_state(result.streak),
        achievements_unlocked=[UnlockedAchievement.from_definition(a) for a in result.achievements_unlocked],
    )


@router.get(f"{USER_PREFIX}/journals", response_model=JournalListResponse)
@limiter.limit(READ_RATE_LIMIT)
async def list_journal_entries(
    request: Request,
    user_id: str,
    limit: int = Query(default=100, ge=1, le=500),
    api_key: str = Depends(verify_api_key),
    container: ServiceContainer = Depends(get_container)
):
    """Journal entries, newest first"""
    entries = await container.journal_service.get_entries(user_id, limit=limit)
    return JournalListResponse(user_id=user_id, entries=entries)


@router.delete(f"{USER_PREFIX}/journals/{{entry_id}}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(WRITE_RATE_LIMIT)
async def delete_journal_entry(
    request: Request,
    user_id: str,
    entry_id: str,
    api_key: str = Depends(verify_api_key),
    container: ServiceContainer = Depends(get_container)
):
    """Delete a journal entry (streaks are unchanged)"""
    await container.journal_service.delete_entry(user_id, entry_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(f"{USER_PREFIX}/journals/analyze", response_model=JournalAnalysis)
@limiter.limit(AI_RATE_LIMIT)
async def analyze_journal_text(
    request: Request,
    user_id: str,
    payload: JournalAnalyzeRequest,
    api_key: str = Depends(verify_api_key),
    container: ServiceContainer = Depends(get_container)
):
    """
    Analyze journal text without saving it

    Rate limit: 10 requests per minute (AI calls are expensive)
    """
    return await container.journal_service.analyze_entry(payload.text, lang=payload.lang)


# ==========================================
# Counselor chat
# ==========================================

@router.post(f"{USER_PREFIX}/chat", response_model=ChatResponse)
@limiter.limit(AI_RATE_LIMIT)
async def chat(
    request: Request,
    user_id: str,
    payload: ChatRequest,
    api_key: str = Depends(verify_api_key),
    container: ServiceContainer = Depends(get_container)
):
    """
    Send a message to the counselor

    Rate limit: 10 requests per minute (AI calls are expensive)
    """
    reply = await container.counselor_service.send_message(
        user_id,
        payload.message,
        user_name=payload.user_name,
        lang=payload.lang,
    )
    return ChatResponse(reply=reply, user_id=user_id)


@router.get(f"{USER_PREFIX}/chat", response_model=ChatHistoryResponse)
@limiter.limit(READ_RATE_LIMIT)
async def get_chat_history(
    request: Request,
    user_id: str,
    limit: int = Query(default=50, ge=1, le=200),
    api_key: str = Depends(verify_api_key),
    container: ServiceContainer = Depends(get_container)
):
    """Recent chat messages, oldest first"""
    messages = await container.counselor_service.get_history(user_id, limit=limit)
    return ChatHistoryResponse(user_id=user_id, messages=messages)


@router.delete(f"{USER_PREFIX}/chat")
@limiter.limit(WRITE_RATE_LIMIT)
async def clear_chat_history(
    request: Request,
    user_id: str,
    api_key: str = Depends(verify_api_key),
    container: ServiceContainer = Depends(get_container)
):
    """Delete the user's chat history"""
    deleted = await container.counselor_service.clear_history(user_id)
    return {"user_id": user_id, "deleted": deleted}


# ==========================================
# Streaks & achievements
# ==========================================

@router.post(f"{USER_PREFIX}/focus-sessions", response_model=ActivityResponse)
@limiter.limit(WRITE_RATE_LIMIT)
async def complete_focus_session(
    request: Request,
    user_id: str,
    payload: FocusSessionRequest,
    api_key: str = Depends(verify_api_key),
    container: ServiceContainer = Depends(get_container)
):
    """Record a completed focus session"""
    result = await container.streak_service.complete_focus_session(user_id)

    return ActivityResponse(
        user_id=user_id,
        streak=StreakSummary.from_state(result.state),
        achievements_unlocked=[UnlockedAchievement.from_definition(a) for a in result.newly_unlocked],
        message=t("focus_session_done", payload.lang, streak=result.state.current_streak),
    )


@router.get(f"{USER_PREFIX}/streaks", response_model=StreakResponse)
@limiter.limit(READ_RATE_LIMIT)
async def get_streaks(
    request: Request,
    user_id: str,
    api_key: str = Depends(verify_api_key),
    container: ServiceContainer = Depends(get_container)
):
    """Get user's streaks"""
    state = await container.streak_service.get_streak_state(user_id)

    return StreakResponse(
        user_id=user_id,
        streak=StreakSummary.from_state(state),
        summary=format_streak_display(state),
    )


@router.get(f"{USER_PREFIX}/achievements", response_model=AchievementResponse)
@limiter.limit(READ_RATE_LIMIT)
async def get_achievements(
    request: Request,
    user_id: str,
    api_key: str = Depends(verify_api_key),
    container: ServiceContainer = Depends(get_container)
):
    """Get user's achievements with progress"""
    achievements = await container.streak_service.get_achievement_progress(user_id)

    return AchievementResponse(
        user_id=user_id,
        achievements=achievements,
        total_unlocked=sum(1 for a in achievements if a["unlocked"]),
        total_achievements=len(achievements),
    )


# ==========================================
# Profiles
# ==========================================

@router.get(f"{USER_PREFIX}/profile", response_model=ProfileResponse)
@limiter.limit(READ_RATE_LIMIT)
async def get_profile(
    request: Request,
    user_id: str,
    api_key: str = Depends(verify_api_key),
    container: ServiceContainer = Depends(get_container)
):
    """Get the user's profile"""
    profile = await container.user_service.get_profile(user_id)
    return ProfileResponse(profile=profile, avatar_url=profile.display_avatar_url)


@router.post(f"{USER_PREFIX}/profile", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(WRITE_RATE_LIMIT)
async def create_profile(
    request: Request,
    user_id: str,
    payload: ProfileCreateRequest,
    api_key: str = Depends(verify_api_key),
    container: ServiceContainer = Depends(get_container)
):
    """Create the user's profile (returns the existing one if already created)"""
    profile = await container.user_service.get_or_create_profile(
        user_id,
        payload.username,
        payload.name,
        avatar_url=payload.avatar_url,
    )
    return ProfileResponse(profile=profile, avatar_url=profile.display_avatar_url)


@router.patch(f"{USER_PREFIX}/profile", response_model=ProfileResponse)
@limiter.limit(WRITE_RATE_LIMIT)
async def update_profile(
    request: Request,
    user_id: str,
    payload: ProfileUpdateRequest,
    api_key: str = Depends(verify_api_key),
    container: ServiceContainer = Depends(get_container)
):
    """Update name, username or avatar"""
    updates = payload.model_dump(exclude_unset=True)
    profile = await container.user_service.update_profile(user_id, updates)
    return ProfileResponse(profile=profile, avatar_url=profile.display_avatar_url)


@router.get("/api/v1/usernames/{username}/available", response_model=UsernameAvailabilityResponse)
@limiter.limit(READ_RATE_LIMIT)
async def check_username(
    request: Request,
    username: str,
    api_key: str = Depends(verify_api_key),
    container: ServiceContainer = Depends(get_container)
):
    """Check whether a username can be claimed"""
    available = await container.user_service.check_username_availability(username)
    return UsernameAvailabilityResponse(username=username, available=available)


# ==========================================
# Health
# ==========================================

@router.get("/api/health", response_model=HealthCheckResponse)
@limiter.limit(MONITORING_RATE_LIMIT)
async def health_check(request: Request, container: ServiceContainer = Depends(get_container)):
    """
    Health check endpoint (no authentication, rate limit: 60/minute for monitoring systems)

    Checks database connectivity and whether the AI service is configured.
    """
    database_status = "connected" if await container.db.ping() else "disconnected"
    if database_status != "connected":
        logger.warning("Health check: database unreachable")

    return HealthCheckResponse(
        status="healthy" if database_status == "connected" else "degraded",
        database=database_status,
        ai="configured" if container.completion_client.is_configured else "demo",
        timestamp=datetime.now(timezone.utc),
    )
