"""
Sample Plugin Agent Application

This example registers the bundled plugins plus a small custom one, builds a
conversation context and runs a few commands by hand, the way an agent loop
would after parsing the model's reply.

Usage:
    PLUGIN_AGENT_PLUGINS_FILE=plugins.json python -m examples.sample_agent

plugins.json:
    {"ChatGPT": {"api key": "sk-..."}, "Google": {"api key": "...", "cse id": "..."}}
"""

import asyncio
from typing import Any

from plugin_agent import Agent, AgentResponse, CommandContext
from plugin_agent.config import get_config, load_plugin_configs
from plugin_agent.plugins import (
    Command,
    EmptyCycle,
    Plugin,
    PluginData,
    PluginRegistry,
    invoke,
)
from plugin_agent.plugins.builtin import default_plugins
from plugin_agent.utils.logging import setup_logging


# Example: a plugin that keeps notes for the agent
class NotesData(PluginData):
    plugin_name = "Notes"

    def __init__(self):
        self.notes: list[str] = []

    async def apply(self, name: str, value: Any) -> Any:
        if name == "add":
            self.notes.append(self.decode(name, value, str))
            return len(self.notes)
        if name == "list":
            return list(self.notes)
        raise self.no_such_operation(name)


class NotesCycle(EmptyCycle):
    async def create_context(self, context, previous_prompt):
        notes = await invoke(context.plugin_data.get_data("Notes"), "list", True, list[str])
        if not notes:
            return None
        return "Your notes:\n" + "\n".join(f"- {note}" for note in notes)

    async def create_data(self, value, config):
        return NotesData()


async def add_note(context: CommandContext, args: dict[str, str]) -> str:
    note = ADD_NOTE.require(args, "note")
    count = await invoke(context.plugin_data.get_data("Notes"), "add", note, int)
    return f"Saved. You have {count} notes."


ADD_NOTE = Command(
    name="add-note",
    purpose="Remember something for later turns.",
    args=(("note", "The text to remember."),),
    run=add_note,
)


async def main():
    config = get_config()
    setup_logging(level=config.log_level)

    registry = PluginRegistry()
    for plugin in default_plugins():
        registry.register(plugin)
    registry.register(Plugin(name="Notes", cycle=NotesCycle(), commands=(ADD_NOTE,)))

    agent = Agent(registry=registry, config=config)
    context = await agent.create_context(load_plugin_configs(config), fatal=["Notes"])

    print("Available commands:")
    print(agent.describe_commands(context))

    turns = [
        AgentResponse(command="add-note", args={"note": "The user likes cats."}),
        AgentResponse(command="ask-chatgpt", args={"query": "Name three cat breeds."}),
        AgentResponse(command="google", args={"query": "cat breeds"}),
    ]
    try:
        for response in turns:
            prompt_context = await agent.build_prompt_context(context)
            if prompt_context:
                print(f"\n[context]\n{prompt_context}")

            output = await agent.run_command(context, response.command, response.args)
            print(f"\n[{response.command}]\n{output}")
            await agent.record_response(context, response, output)
    finally:
        await agent.close_context(context)


if __name__ == "__main__":
    asyncio.run(main())
