"""Agno completion service for single-turn chat requests.

Each call sends the fixed system instruction plus the latest user text to an
OpenAI-compatible endpoint (Groq by default) and returns the reply text.

The agent is built without storage and without history, so every request is
stateless: earlier turns of the conversation are not forwarded.
"""

import logging

from agno.agent import Agent
from agno.models.openai import OpenAIChat

from bootstrap_chat.agent.config import CompletionConfig, get_completion_config
from bootstrap_chat.errors import CompletionError

logger = logging.getLogger(__name__)


class CompletionService:
    """Service wrapping an Agno agent that answers one message at a time.

    Wraps Agno's Agent with:
    - A fixed system instruction in place of Agno's generated system message
    - No session storage, so no conversation history is sent
    - A single error type for callers
    """

    def __init__(self, config: CompletionConfig | None = None) -> None:
        """Initialize the completion service.

        Args:
            config: Optional completion configuration.
                    Loads from environment if not provided.
        """
        self._config = config or get_completion_config()
        self._agent = self._create_agent()

    @property
    def model_name(self) -> str:
        return self._config.model_name

    def _create_agent(self) -> Agent:
        """Create the Agno agent instance.

        Returns:
            Configured Agent pointed at the OpenAI-compatible endpoint.
        """
        model = OpenAIChat(
            id=self._config.model_name,
            api_key=self._config.api_key,
            base_url=self._config.base_url,
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
        )

        return Agent(
            model=model,
            system_message=self._config.system_instruction,
            add_history_to_context=False,
            markdown=False,
        )

    async def complete(self, user_text: str) -> str:
        """Get the reply for a single user message.

        Args:
            user_text: The user's message.

        Returns:
            Reply text from the first returned choice, or "" if the model
            returned no content.

        Raises:
            CompletionError: If the request fails for any reason.
        """
        try:
            response = await self._agent.arun(user_text)
        except Exception as e:
            logger.error(f"Completion request to {self._config.model_name} failed: {e}")
            raise CompletionError("Failed to get a response from the AI") from e

        content = getattr(response, "content", None)
        if content is None:
            return ""
        return content if isinstance(content, str) else str(content)
