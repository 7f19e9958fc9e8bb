"""LLM agent for the school-finder assistant using Gemini with function calling."""

import logging
from typing import Generator

from google import genai
from google.genai import types

from config.settings import get_settings
from .prompts import SYSTEM_PROMPT
from .tools import GEMINI_TOOLS, execute_tool

logger = logging.getLogger(__name__)

# Stop a runaway tool loop after this many calls in one turn
MAX_TOOL_CALLS = 5


def to_genai_history(conversation_history: list[dict]) -> list[types.Content]:
    """Convert {'role', 'content'} messages to google.genai Content objects."""
    history = []
    for msg in conversation_history:
        role = "user" if msg["role"] == "user" else "model"
        history.append(types.Content(role=role, parts=[types.Part.from_text(text=msg["content"])]))
    return history


class ChatAgent:
    """Chat agent that answers questions about NYC schools."""

    def __init__(self):
        settings = get_settings()
        self.client = genai.Client(api_key=settings.GOOGLE_API_KEY)
        self.model_name = settings.LLM_MODEL
        self.temperature = settings.LLM_TEMPERATURE
        self.max_tokens = settings.LLM_MAX_TOKENS

    def _config(self, context: str = "") -> types.GenerateContentConfig:
        instruction = SYSTEM_PROMPT + "\n\n" + context if context else SYSTEM_PROMPT
        return types.GenerateContentConfig(
            system_instruction=instruction,
            tools=[GEMINI_TOOLS],
            temperature=self.temperature,
            max_output_tokens=self.max_tokens,
        )

    def chat(
        self,
        user_message: str,
        conversation_history: list[dict],
        context: str = "",
    ) -> Generator[str, None, None]:
        """
        Send a message and yield the response.

        Args:
            user_message: The user's message
            conversation_history: Previous messages in the conversation
            context: Optional session context (e.g. the schools being compared)

        Yields:
            Text chunks as they are generated
        """
        chat = self.client.chats.create(
            model=self.model_name,
            config=self._config(context),
            history=to_genai_history(conversation_history),
        )
        response = chat.send_message(message=user_message)

        tool_calls = 0
        while response.function_calls and tool_calls < MAX_TOOL_CALLS:
            function_call = response.function_calls[0]
            tool_calls += 1
            logger.info("Tool call %s(%s)", function_call.name, dict(function_call.args or {}))

            yield "\n\n*Looking up schools...*\n\n"

            tool_result = execute_tool(function_call.name, dict(function_call.args or {}))
            function_response = types.Part.from_function_response(
                name=function_call.name,
                response={"result": tool_result},
            )
            response = chat.send_message(message=function_response)

        if response.function_calls:
            logger.warning("Stopped after %d tool calls without a text answer", tool_calls)
        if response.text:
            yield response.text

    def get_response(
        self,
        user_message: str,
        conversation_history: list[dict],
        context: str = "",
    ) -> str:
        """Get a complete response (non-streaming)."""
        return "".join(self.chat(user_message, conversation_history, context=context))
