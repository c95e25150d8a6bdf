"""Google plugin: Custom Search through the Browse plugin.

Operations on the ``Google`` state object:

===========  =======  ==========
operation    input    output
===========  =======  ==========
get api key  ignored  str
get cse id   ignored  str
===========  =======  ==========

Requires the ``Browse`` plugin.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from plugin_agent.config import AgentConfig
from plugin_agent.context import CommandContext
from plugin_agent.plugins.base import Command, EmptyCycle, Plugin, PluginData
from plugin_agent.plugins.builtin.browse import PLUGIN_NAME as BROWSE
from plugin_agent.plugins.builtin.browse import BrowseRequest
from plugin_agent.plugins.invoke import invoke

logger = logging.getLogger(__name__)

PLUGIN_NAME = "Google"

SEARCH_URL = "https://www.googleapis.com/customsearch/v1"
RESULT_COUNT = 7


class SearchItem(BaseModel):
    title: str = ""
    link: str = ""
    snippet: str = ""


class SearchResponse(BaseModel):
    """The part of a Custom Search response worth showing the model."""

    items: list[SearchItem] = Field(default_factory=list)


class GooglePluginConfig(BaseModel):
    """Configuration payload for the Google plugin."""

    model_config = ConfigDict(populate_by_name=True)

    cse_id: str = Field(alias="cse id")
    api_key: str = Field(alias="api key")


class GoogleData(PluginData):
    plugin_name = PLUGIN_NAME

    def __init__(self, api_key: str, cse_id: str):
        self.api_key = api_key
        self.cse_id = cse_id

    async def apply(self, name: str, value: Any) -> Any:
        if name == "get api key":
            return self.api_key
        if name == "get cse id":
            return self.cse_id
        raise self.no_such_operation(name)


async def google(context: CommandContext, args: dict[str, str]) -> str:
    query = GOOGLE.require(args, "query")

    google_data = context.plugin_data.get_data(PLUGIN_NAME)
    api_key = await invoke(google_data, "get api key", True, str)
    cse_id = await invoke(google_data, "get cse id", True, str)

    browse_data = context.plugin_data.get_data(BROWSE)
    body = await invoke(
        browse_data,
        "browse",
        BrowseRequest(
            url=SEARCH_URL,
            params=[
                ("key", api_key),
                ("cx", cse_id),
                ("q", query),
                ("num", str(RESULT_COUNT)),
            ],
        ),
        str,
    )

    try:
        results = SearchResponse.model_validate_json(body)
    except ValidationError as e:
        logger.warning(f"Unparseable search response for {query!r}: {e}")
        return (
            f'Unable to parse your Google request for "{query}". '
            "Try modifying your query or waiting a bit."
        )

    return (
        f"{results.model_dump_json()}\n\n"
        "You may want to consider using 'browse-article' to browse the searched websites."
    )


class GoogleCycle(EmptyCycle):
    async def create_data(self, value: Any, config: AgentConfig) -> PluginData | None:
        try:
            settings = GooglePluginConfig.model_validate(value)
        except ValidationError as e:
            logger.warning(f"Invalid {PLUGIN_NAME} configuration: {e}")
            return None

        return GoogleData(api_key=settings.api_key, cse_id=settings.cse_id)


GOOGLE = Command(
    name="google",
    purpose="Google Search",
    args=(
        (
            "query",
            "The request to search. Create a short, direct query with keywords.",
        ),
    ),
    run=google,
)


def create_google() -> Plugin:
    return Plugin(
        name=PLUGIN_NAME,
        dependencies=(BROWSE,),
        cycle=GoogleCycle(),
        commands=(GOOGLE,),
    )
