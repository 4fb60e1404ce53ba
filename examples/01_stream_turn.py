from __future__ import annotations

import asyncio
import json
import os

from turnwire import (
    Completed,
    OutputItemDone,
    OutputTextDelta,
    ReasoningSummaryDelta,
    Turnwire,
    TurnwireError,
    compute_security_advice,
    tool,
)


class MissingEnvVarError(RuntimeError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Set {name} before running this example.")


def require_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise MissingEnvVarError(name)
    return value


@tool
def shell(command: list[str]) -> str:
    """Run a command in the workspace."""
    return ""


async def main() -> None:
    api_key = require_env("LLM_API_KEY")
    model = os.getenv("TURNWIRE_MODEL", "openai:gpt-5")
    client = Turnwire(model, api_key=api_key, user_instructions="Answer in one paragraph.")

    prompt = client.prompt("List the files in the current directory.", tools=[shell])
    stream = await client.turns.stream(prompt, prompt_cache_key="example-conversation")
    try:
        async for event in stream:
            if isinstance(event, OutputTextDelta):
                print(event.text, end="")
            elif isinstance(event, ReasoningSummaryDelta):
                print(f"[reasoning] {event.text}", end="")
            elif isinstance(event, OutputItemDone) and event.item.get("type") == "function_call":
                print("\ntool_call:", event.item)
                arguments = json.loads(event.item.get("arguments") or "{}")
                advice = compute_security_advice(arguments.get("command", []))
                if advice:
                    print("advice:", advice)
            elif isinstance(event, Completed):
                print("\ncompleted:", event.response_id, event.token_usage)
    except TurnwireError as exc:
        print("\nerror:", exc)


if __name__ == "__main__":
    asyncio.run(main())
