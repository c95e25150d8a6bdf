"""ChatGPT plugin: a conversation memory that can ask OpenAI for a reply.

Operations on the ``ChatGPT`` state object:

=========  ====================================  ==============================
operation  input                                 output
=========  ====================================  ==============================
len        ignored                               number of messages
push       {"role": ..., "content": str}         true
clear      ignored                               true
get        ignored                               [{"role", "content"}, ...]
respond    ignored                               newest assistant message text
=========  ====================================  ==============================

``role`` is one of ``system``, ``user`` or ``assistant``.
"""

from __future__ import annotations

import logging
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from plugin_agent.config import AgentConfig
from plugin_agent.context import CommandContext
from plugin_agent.models.base import BaseLLM
from plugin_agent.models.openai import OpenAI
from plugin_agent.plugins.base import Command, EmptyCycle, Plugin, PluginData
from plugin_agent.plugins.invoke import invoke

logger = logging.getLogger(__name__)

PLUGIN_NAME = "ChatGPT"

CHAT_GPT_PROMPT = (
    "You are ChatGPT, a large language model trained by OpenAI. As an "
    "assistant, your purpose is to provide helpful and informative responses "
    "to a wide variety of questions and topics, while also engaging in "
    "natural and friendly conversation with users.\n\n"
    "You must always prioritize safety and appropriate behavior in all "
    "interactions. Avoid any content that could be harmful or offensive, and "
    "always maintain a respectful and polite tone."
)

Role = Literal["system", "user", "assistant"]


class ChatMessage(BaseModel):
    """A role-tagged message in the plugin's memory."""

    role: Role
    content: str


class ChatGPTPluginConfig(BaseModel):
    """Configuration payload for the ChatGPT plugin."""

    model_config = ConfigDict(populate_by_name=True)

    api_key: str = Field(alias="api key")
    model: str | None = None


class ChatGPTData(PluginData):
    """Message memory plus the provider that answers it."""

    plugin_name = PLUGIN_NAME

    def __init__(self, model: BaseLLM, memory: list[ChatMessage] | None = None):
        self.model = model
        self.memory: list[ChatMessage] = list(memory or [])
        self._operations = {
            "len": self._len,
            "push": self._push,
            "clear": self._clear,
            "get": self._get,
            "respond": self._respond,
        }

    async def apply(self, name: str, value: Any) -> Any:
        operation = self._operations.get(name)
        if operation is None:
            raise self.no_such_operation(name)
        return await operation(value)

    async def _len(self, value: Any) -> int:
        return len(self.memory)

    async def _push(self, value: Any) -> bool:
        self.memory.append(self.decode("push", value, ChatMessage))
        return True

    async def _clear(self, value: Any) -> bool:
        self.memory.clear()
        return True

    async def _get(self, value: Any) -> list[dict[str, str]]:
        return [message.model_dump() for message in self.memory]

    async def _respond(self, value: Any) -> str:
        # Provider errors propagate unchanged; nothing is retried.
        response = await self.model.generate(
            [message.model_dump() for message in self.memory]
        )
        return response.content


async def ask_chatgpt(context: CommandContext, query: str) -> str:
    """
    Ask ChatGPT a question, remembering the exchange.

    A fresh memory is seeded with the system prompt before the first user
    message, and the reply is stored as an assistant message.
    """
    data = context.plugin_data.get_data(PLUGIN_NAME)

    if await invoke(data, "len", True, int) == 0:
        await invoke(
            data, "push", ChatMessage(role="system", content=CHAT_GPT_PROMPT), bool
        )

    await invoke(data, "push", ChatMessage(role="user", content=query), bool)
    content = await invoke(data, "respond", True, str)
    await invoke(data, "push", ChatMessage(role="assistant", content=content), bool)

    return content


async def chatgpt(context: CommandContext, args: dict[str, str]) -> str:
    query = ASK_CHATGPT.require(args, "query")
    return await ask_chatgpt(context, query)


async def reset_chatgpt(context: CommandContext, args: dict[str, str]) -> str:
    data = context.plugin_data.get_data(PLUGIN_NAME)
    await invoke(data, "clear", True, bool)
    return "Successful."


class ChatGPTCycle(EmptyCycle):
    async def create_context(
        self, context: CommandContext, previous_prompt: str | None
    ) -> str | None:
        data = context.plugin_data.get_data(PLUGIN_NAME)
        count = await invoke(data, "len", True, int)
        if count == 0:
            return None
        return (
            f"ChatGPT remembers {count} messages of your conversation with it. "
            "Use 'reset-chatgpt' to start over."
        )

    async def create_data(self, value: Any, config: AgentConfig) -> PluginData | None:
        try:
            settings = ChatGPTPluginConfig.model_validate(value)
        except ValidationError as e:
            logger.warning(f"Invalid {PLUGIN_NAME} configuration: {e}")
            return None

        model = OpenAI(
            model=settings.model or config.chat_model,
            api_key=settings.api_key,
            base_url=config.openai_base_url,
        )
        return ChatGPTData(model=model)


ASK_CHATGPT = Command(
    name="ask-chatgpt",
    purpose=(
        "Ask ChatGPT, a helpful assistant and large-language model, to help "
        "answer your question."
    ),
    args=(("query", "The query to ask ChatGPT. Be detailed!"),),
    run=chatgpt,
)

RESET_CHATGPT = Command(
    name="reset-chatgpt",
    purpose="Reset the memory of ChatGPT.",
    run=reset_chatgpt,
)


def create_chatgpt() -> Plugin:
    return Plugin(
        name=PLUGIN_NAME,
        cycle=ChatGPTCycle(),
        commands=(ASK_CHATGPT, RESET_CHATGPT),
    )
