"""
CLI helpers: invocation text for generated-file headers and document I/O.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click

PROGRAM_NAME = "asyncapi-schema"


def describe_invocation() -> str:
    """
    Describe the running command for the header of a generated file.

    Path arguments are shortened to their file names so the text does not
    depend on the directory the command ran in. Options only appear when
    set to something other than their default.
    """
    ctx = click.get_current_context(silent=True)
    if ctx is None:
        return PROGRAM_NAME

    words = [ctx.command_path]
    options = []
    for param in ctx.command.params:
        value = ctx.params.get(param.name)
        if value is None or value == param.default:
            continue
        if isinstance(param, click.Argument):
            words.append(Path(value).name if isinstance(param.type, click.Path) else str(value))
        elif param.is_flag:
            options.append(param.opts[0])
        else:
            options.extend([param.opts[0], str(value)])

    return " ".join(words + options)


def load_json(path: str | Path) -> Any:
    """Read a JSON document, reporting decode errors as click exceptions."""
    with open(path, encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise click.ClickException(f"{path}: invalid JSON ({e})") from e


def write_text(path: str | Path, text: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
