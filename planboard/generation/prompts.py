"""Prompt templates for project board generation."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path

from planboard.llm.models import Turn

SYSTEM_INSTRUCTION = """\
You are a planning assistant that turns a user's request into a project board for
xTiles, a visual project management tool. Reply with Markdown only.

## Steps

1. Work out what the user needs and write complete, useful content for it, in the
   same language as the request. Use web search when the request needs current
   facts or links; every link must point to a real page.
2. Lay that content out using the board structure below.

## Board Structure

- Start with `# <Project Title>`: one or two simple words, no "Project:" prefix.
- Follow with exactly one `## <View Name>`: one or two words, different from the title.
- Right after the view name add `@cover: <one mood keyword>`.
- Everything else is split into at least two `### <Tile Title>` sections, each with a
  unique title and preferably an emoji.
- After each tile title put three metadata lines, then one empty line, then content:
  `@position: x, y, w, h`, `@colorSize: <style>`, `@color: <color>`.
- An image tile holds only `@mediaKeyword: <keyword>` after its metadata.

## Content Rules

- No headings inside tiles; use a bold line instead.
- No nested lists. Bullets for plain text, `1.` for steps, `- [ ]` for tasks
  (one per line, blank line between tasks).
- Links go on their own line as `[text](url)`, never inside list items.
- Include exactly one Markdown table, alone in its own tile, with a `| --- |`
  separator row.

## Conversation History

- A request without history starts a new, independent project.
- A request with history continues the same project: keep the project title, add a
  new view with its own cover and tiles, and only cover what the latest request asks.
"""

USER_PROMPT_TEMPLATE = (
    "Now, based on all the rules above, generate a project plan for the following "
    'user request:\n" {user_text} "'
)

HISTORY_PREFIX = "HISTORY (full transcript as JSON with roles):\n"


def build_user_prompt(user_text: str) -> str:
    """Wrap raw user text in the generation instruction frame."""
    return USER_PROMPT_TEMPLATE.format(user_text=user_text)


def serialize_history(transcript: Sequence[Turn]) -> str:
    """Render a transcript as an indented JSON list of role/text pairs."""
    structured = [{"role": t.role, "text": t.content} for t in transcript]
    return HISTORY_PREFIX + json.dumps(structured, indent=2, ensure_ascii=False)


def load_system_instruction(path: str | None = None) -> str:
    """Return the built-in instruction, or the contents of ``path`` when given."""
    if not path:
        return SYSTEM_INSTRUCTION
    p = Path(path)
    if not p.is_file():
        raise ValueError(f"System prompt file not found: {path}")
    text = p.read_text(encoding="utf-8").strip()
    if not text:
        raise ValueError(f"System prompt file is empty: {path}")
    return text
