"""Browse plugin: HTTP GET on behalf of other plugins and the agent.

Operations on the ``Browse`` state object:

=========  ==========================================  ===================
operation  input                                       output
=========  ==========================================  ===================
browse     {"url": str, "params": [[key, value], ...]}  response body text
=========  ==========================================  ===================
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from bs4 import BeautifulSoup
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from plugin_agent.config import AgentConfig
from plugin_agent.context import CommandContext
from plugin_agent.plugins.base import Command, EmptyCycle, Plugin, PluginData
from plugin_agent.plugins.invoke import invoke

logger = logging.getLogger(__name__)

PLUGIN_NAME = "Browse"


class BrowseRequest(BaseModel):
    """A GET request with ordered query parameters."""

    url: str
    params: list[tuple[str, str]] = Field(default_factory=list)


class BrowsePluginConfig(BaseModel):
    """Configuration payload for the Browse plugin."""

    model_config = ConfigDict(populate_by_name=True)

    timeout: float = 30.0
    max_length: int = Field(default=8000, alias="max length", gt=0)


class BrowseData(PluginData):
    plugin_name = PLUGIN_NAME

    def __init__(self, client: httpx.AsyncClient, max_length: int = 8000):
        self.client = client
        self.max_length = max_length

    async def apply(self, name: str, value: Any) -> Any:
        if name == "browse":
            request = self.decode(name, value, BrowseRequest)
            logger.debug(f"GET {request.url}")
            response = await self.client.get(request.url, params=request.params)
            response.raise_for_status()
            return response.text
        raise self.no_such_operation(name)

    async def close(self) -> None:
        await self.client.aclose()


BLOCK_TAGS = [
    "address", "article", "aside", "blockquote", "dd", "div", "dl", "dt",
    "figcaption", "footer", "form", "h1", "h2", "h3", "h4", "h5", "h6",
    "header", "hr", "li", "main", "nav", "ol", "p", "pre", "section",
    "table", "td", "th", "title", "tr", "ul",
]


def extract_text(html: str) -> str:
    """Visible text of an HTML page, one non-empty line per block."""
    soup = BeautifulSoup(html, "html.parser")

    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    for tag in soup("br"):
        tag.replace_with("\n")
    # Inline elements stay on their line; only block boundaries break it.
    for tag in soup(BLOCK_TAGS):
        tag.insert_before("\n")
        tag.append("\n")

    lines = [" ".join(line.split()) for line in soup.get_text().splitlines()]
    return "\n".join(line for line in lines if line)


async def browse_article(context: CommandContext, args: dict[str, str]) -> str:
    url = BROWSE_ARTICLE.require(args, "url")
    data = context.plugin_data.get_data(PLUGIN_NAME)

    body = await invoke(data, "browse", BrowseRequest(url=url), str)
    text = extract_text(body)

    max_length = getattr(data, "max_length", len(text))
    if len(text) > max_length:
        text = text[:max_length] + "\n[... truncated]"
    return text


class BrowseCycle(EmptyCycle):
    async def create_data(self, value: Any, config: AgentConfig) -> PluginData | None:
        try:
            settings = BrowsePluginConfig.model_validate(value or {})
        except ValidationError as e:
            logger.warning(f"Invalid {PLUGIN_NAME} configuration: {e}")
            return None

        client = httpx.AsyncClient(timeout=settings.timeout, follow_redirects=True)
        return BrowseData(client=client, max_length=settings.max_length)


BROWSE_ARTICLE = Command(
    name="browse-article",
    purpose="Read the text of a web page.",
    args=(("url", "The full URL of the page to read."),),
    run=browse_article,
)


def create_browse() -> Plugin:
    return Plugin(
        name=PLUGIN_NAME,
        cycle=BrowseCycle(),
        commands=(BROWSE_ARTICLE,),
    )
