"""Unit tests for CounselorService"""
import pytest
from unittest.mock import AsyncMock, Mock, patch
from datetime import datetime, timezone

from counsy.exceptions import ValidationError
from counsy.models.chat import ChatMessage, ChatRole
from counsy.services.counselor_service import CounselorService


def _message(role, text, minute=0):
    return ChatMessage(
        id=f"msg-{role.value}-{minute}",
        user_id="8d3c1f6e-2b4a-4c1e-9f7a-5e0d2c9b1a77",
        role=role,
        text=text,
        created_at=datetime(2024, 1, 3, 18, minute, tzinfo=timezone.utc),
    )


async def _echo_save(db, user_id, role, text):
    return _message(role, text)


@pytest.mark.asyncio
async def test_send_message_with_ai_reply(completion_client_factory, test_user_id):
    client = completion_client_factory("That sounds stressful, Maya. Want to try a short breathing break? 🌿")
    db = Mock()
    service = CounselorService(db, client)
    history = [
        _message(ChatRole.USER, "Exams start Monday", 1),
        _message(ChatRole.MODEL, "You've prepared well.", 2),
    ]

    with patch('counsy.services.counselor_service.queries.get_chat_history', AsyncMock(return_value=history)):
        with patch('counsy.services.counselor_service.queries.save_chat_message', AsyncMock(side_effect=_echo_save)) as mock_save:
            reply = await service.send_message(test_user_id, "  I can't focus  ", user_name="Maya")

    assert reply.role == ChatRole.MODEL
    assert reply.text.startswith("That sounds stressful")

    saved_roles = [call.args[2] for call in mock_save.await_args_list]
    assert saved_roles == [ChatRole.USER, ChatRole.MODEL]
    assert mock_save.await_args_list[0].args[3] == "I can't focus"

    messages = client.complete.await_args.args[0]
    assert messages[0]["role"] == "system"
    assert "Maya" in messages[0]["content"]
    assert messages[1] == {"role": "user", "content": "Exams start Monday"}
    assert messages[2] == {"role": "assistant", "content": "You've prepared well."}
    assert messages[-1] == {"role": "user", "content": "I can't focus"}
    assert client.complete.await_args.kwargs["max_tokens"] == 150


@pytest.mark.asyncio
@pytest.mark.parametrize("text,expected_start", [
    ("hello there", "Hello Sam!"),
    ("I feel so sad today", "I'm sorry you're feeling this way."),
    ("exam stress is killing me", "Take a deep breath with me."),
    ("thanks for listening", "You're very welcome!"),
    ("my roommate keeps snoring", "I hear you, and I understand."),
])
async def test_send_message_offline_uses_canned_reply(offline_completion_client, test_user_id, text, expected_start):
    service = CounselorService(Mock(), offline_completion_client)

    with patch('counsy.services.counselor_service.queries.get_chat_history', AsyncMock(return_value=[])):
        with patch('counsy.services.counselor_service.queries.save_chat_message', AsyncMock(side_effect=_echo_save)):
            reply = await service.send_message(test_user_id, text, user_name="Sam")

    assert reply.text.startswith(expected_start)


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "    ", None])
async def test_send_message_rejects_blank(offline_completion_client, test_user_id, text):
    service = CounselorService(Mock(), offline_completion_client)

    with patch('counsy.services.counselor_service.queries.save_chat_message', AsyncMock()) as mock_save:
        with pytest.raises(ValidationError):
            await service.send_message(test_user_id, text)

    mock_save.assert_not_awaited()


@pytest.mark.asyncio
async def test_send_message_rejects_overlong(offline_completion_client, test_user_id):
    service = CounselorService(Mock(), offline_completion_client)

    with pytest.raises(ValidationError):
        await service.send_message(test_user_id, "a" * (CounselorService.MAX_MESSAGE_LENGTH + 1))


@pytest.mark.asyncio
async def test_history_and_clear(offline_completion_client, test_user_id):
    db = Mock()
    service = CounselorService(db, offline_completion_client)

    with patch('counsy.services.counselor_service.queries.get_chat_history', AsyncMock(return_value=[])) as mock_get:
        assert await service.get_history(test_user_id, limit=20) == []
    mock_get.assert_awaited_once_with(db, test_user_id, limit=20)

    with patch('counsy.services.counselor_service.queries.clear_chat_history', AsyncMock(return_value=7)):
        assert await service.clear_history(test_user_id) == 7
