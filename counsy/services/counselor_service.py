"""
CounselorService - AI chat counselor

Keeps the chat history and produces counselor replies. When the completion
service is unavailable the reply comes from the canned keyword responses.
"""

import logging
from typing import List

from counsy.ai.prompts import build_counselor_messages
from counsy.db import queries
from counsy.exceptions import ValidationError
from counsy.i18n.translations import fallback_counselor_reply
from counsy.models.chat import ChatMessage, ChatRole
from counsy.models.completion import Completed

logger = logging.getLogger(__name__)

# Model roles in the completion API
_API_ROLES = {
    ChatRole.USER: "user",
    ChatRole.MODEL: "assistant",
}


class CounselorService:
    """
    Service for the AI counselor chat.

    Responsibilities:
    - Persist user and model messages
    - Build the prompt from recent history
    - Fall back to canned replies when the AI is unavailable
    """

    HISTORY_LIMIT = 10
    MAX_MESSAGE_LENGTH = 2000

    def __init__(self, db_connection, completion_client):
        self.db = db_connection
        self.completion = completion_client
        logger.debug("CounselorService initialized")

    async def send_message(
        self,
        user_id: str,
        text: str,
        user_name: str = "Friend",
        lang: str = "en"
    ) -> ChatMessage:
        """
        Send a message to the counselor and get the stored reply.

        Args:
            user_id: User identifier
            text: The student's message
            user_name: Name the counselor uses to address the student
            lang: Language for fallback replies

        Returns:
            The counselor's ChatMessage

        Raises:
            ValidationError: blank or overlong message
        """
        text = (text or "").strip()
        if not text:
            raise ValidationError("Message cannot be empty", field="text", value=text)
        if len(text) > self.MAX_MESSAGE_LENGTH:
            raise ValidationError(
                f"Message is longer than {self.MAX_MESSAGE_LENGTH} characters",
                field="text",
                value=f"{len(text)} characters"
            )

        history = await queries.get_chat_history(self.db, user_id, limit=self.HISTORY_LIMIT)
        await queries.save_chat_message(self.db, user_id, ChatRole.USER, text)

        messages = build_counselor_messages(
            text,
            user_name,
            history=[{"role": _API_ROLES[m.role], "content": m.text} for m in history],
        )
        result = await self.completion.complete(messages, max_tokens=150)

        if isinstance(result, Completed):
            reply = result.text
        else:
            logger.info(f"Counselor reply unavailable ({result.reason}), using canned reply")
            reply = fallback_counselor_reply(text, user_name, lang)

        return await queries.save_chat_message(self.db, user_id, ChatRole.MODEL, reply)

    async def get_history(self, user_id: str, limit: int = 50) -> List[ChatMessage]:
        """Recent chat messages, oldest first"""
        return await queries.get_chat_history(self.db, user_id, limit=limit)

    async def clear_history(self, user_id: str) -> int:
        """Delete the user's chat history"""
        return await queries.clear_chat_history(self.db, user_id)
