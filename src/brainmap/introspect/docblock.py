"""Tokenizer for ``@property``/``@property-read`` tags in class docstrings."""

from __future__ import annotations

import inspect
import re

from brainmap.types import DocTag, PropertyRecord

_TAG_LINE = re.compile(r"^\s*@(?P<kind>[A-Za-z][\w-]*)(?P<rest>.*)$")
_BRACKETS = {"[": "]", "(": ")", "{": "}", "<": ">"}

# Tag kind -> property direction. Every other kind is ignored.
TAG_DIRECTIONS = {
    "property-read": "output",
    "property": "input",
}


def parse_doc_tags(docstring: str | None) -> list[DocTag]:
    """Parse every ``@kind [type] [$]name`` line of a docstring.

    Lines that do not start with ``@`` are prose and are skipped. A tag with
    a single operand is read as a name with type ``mixed``; a tag without
    operands is dropped.
    """

    if not docstring:
        return []

    tags: list[DocTag] = []
    for line in inspect.cleandoc(docstring).splitlines():
        match = _TAG_LINE.match(line)
        if not match:
            continue
        tokens = _tokenize(match.group("rest"))
        if not tokens:
            continue
        if len(tokens) == 1:
            type_, name = "mixed", tokens[0]
        else:
            type_, name = tokens[0], tokens[1]
        name = name.lstrip("$")
        if not name:
            continue
        tags.append(DocTag(kind=match.group("kind"), type=type_, name=name))
    return tags


def properties_from_tags(tags: list[DocTag]) -> list[PropertyRecord]:
    """Keep property tags and order outputs before inputs."""

    records = [
        PropertyRecord(name=tag.name, type=tag.type, direction=TAG_DIRECTIONS[tag.kind])
        for tag in tags
        if tag.kind in TAG_DIRECTIONS and tag.name.isidentifier()
    ]
    # sorted() is stable with reverse=True, so declaration order survives per group.
    return sorted(records, key=lambda record: record.direction, reverse=True)


def _tokenize(text: str) -> list[str]:
    """Split on whitespace, keeping bracketed type expressions whole."""

    tokens: list[str] = []
    current: list[str] = []
    stack: list[str] = []
    for char in text.strip():
        if char in _BRACKETS:
            stack.append(_BRACKETS[char])
        elif stack and char == stack[-1]:
            stack.pop()
        if char.isspace() and not stack:
            if current:
                tokens.append("".join(current))
                current = []
            continue
        current.append(char)
    if stack:
        # Unbalanced brackets: fall back to a plain whitespace split.
        return text.split()
    if current:
        tokens.append("".join(current))
    return tokens
