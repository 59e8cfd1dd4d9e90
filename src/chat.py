"""Chat service: persist conversation turns and answer them with an LLM."""

import logging

import asyncpg
import litellm

from config.settings import settings
from src.db.conversations import create_message, get_conversation, update_conversation_title
from src.db.models import AnalyzeQueryResponse
from src.errors import NotFoundError, UpstreamServiceError
from src.llm.gateway import LLMGateway
from src.llm.prompts import build_chat_messages

logger = logging.getLogger(__name__)

_TITLE_MAX_CHARS = 50
_NO_RESPONSE = "No response generated"


def conversation_title(content: str) -> str:
    """Derive a conversation title from its first message."""
    if len(content) > _TITLE_MAX_CHARS:
        return content[:_TITLE_MAX_CHARS] + "..."
    return content


def to_upstream_error(exc: Exception) -> UpstreamServiceError:
    """Translate a provider exception into a user-facing error."""
    text = str(exc).lower()
    if isinstance(exc, litellm.AuthenticationError) or "api key" in text:
        return UpstreamServiceError(
            "AI service configuration error. Please check API keys.", status_code=500
        )
    if isinstance(exc, litellm.RateLimitError) or "rate limit" in text:
        return UpstreamServiceError(
            "Service rate limit exceeded. Please try again in a moment.", status_code=429
        )
    if isinstance(exc, (litellm.NotFoundError, litellm.BadRequestError)) and "model" in text:
        return UpstreamServiceError(
            "Invalid model specified. Please select a valid model.", status_code=400
        )
    return UpstreamServiceError(f"AI service error: {exc}")


class ChatService:
    """Answers chat messages within a stored conversation."""

    def __init__(
        self,
        llm: LLMGateway,
        pool: asyncpg.Pool,
        history_limit: int | None = None,
    ) -> None:
        self._llm = llm
        self._pool = pool
        self._history_limit = history_limit or settings.chat_history_messages

    async def analyze_query(
        self,
        conversation_id: int,
        content: str,
        model: str,
    ) -> AnalyzeQueryResponse:
        """Store the user's message, ask the LLM, store and return the reply.

        Args:
            conversation_id: Existing conversation to append to.
            content: The user's message.
            model: UI model name, e.g. "gpt-4o" or "gemini-pro".

        Raises:
            NotFoundError: If the conversation does not exist.
            UpstreamServiceError: If the LLM call fails.
        """
        conversation = await get_conversation(self._pool, conversation_id)
        if conversation is None:
            raise NotFoundError("Conversation not found")

        history = conversation.messages[-self._history_limit:]
        user_message = await create_message(self._pool, conversation_id, "user", content)

        messages = build_chat_messages(content, history)
        try:
            result = await self._llm.complete(messages, model=model, temperature=0.7)
        except Exception as exc:
            logger.exception("Chat completion failed conversation=%s", conversation_id)
            raise to_upstream_error(exc) from exc

        assistant_message = await create_message(
            self._pool,
            conversation_id,
            "assistant",
            result.content or _NO_RESPONSE,
            model=model,
        )

        if not conversation.messages:
            await update_conversation_title(
                self._pool, conversation_id, conversation_title(content)
            )

        return AnalyzeQueryResponse(
            user_message=user_message,
            assistant_message=assistant_message,
            tokens_used=result.tokens_used,
        )
