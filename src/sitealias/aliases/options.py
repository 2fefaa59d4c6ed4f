"""
Command-scoped option merging.

An alias may carry per-command overrides under its ``command`` key,
nested by command token, with the overrides in an ``options`` mapping
at any depth:

    command:
      sql:
        options:
          structure-tables-key: common
        sync:
          options:
            no-dump: true

Running ``sql:sync`` against this alias applies both ``sql.options`` and
``sql.sync.options``; deeper overrides win.
"""

from __future__ import annotations

import copy as _copy
import re as _re
import typing as _typing

import sitealias.aliases.record as record

COMMAND_KEY = "command"
OPTIONS_KEY = "options"

_COMMAND_SPLIT_RE = _re.compile(r"[:\s]+")


def command_path(command: str | _typing.Sequence[str] | None) -> list[str]:
    """
    Normalize a command name into its token path.

    ``"sql:sync"``, ``"sql sync"`` and ``["sql", "sync"]`` all give
    ``["sql", "sync"]``.
    """
    if command is None:
        return []
    if isinstance(command, str):
        return [t for t in _COMMAND_SPLIT_RE.split(command.strip()) if t]
    return [t for t in command if t]


class OptionMerger:
    """Computes the effective option set of an alias for one command."""

    def overrides(
        self,
        options: _typing.Mapping[str, _typing.Any],
        path: _typing.Sequence[str],
    ) -> list[_typing.Mapping[str, _typing.Any]]:
        """
        Collect the command-scoped override maps along a command path.

        Returns:
            Override maps, shallowest first. Unknown tokens end the walk.
        """
        found: list[_typing.Mapping[str, _typing.Any]] = []
        node = options.get(COMMAND_KEY)
        for token in path:
            if not isinstance(node, _typing.Mapping):
                break
            node = node.get(token)
            if not isinstance(node, _typing.Mapping):
                break
            scoped = node.get(OPTIONS_KEY)
            if isinstance(scoped, _typing.Mapping):
                found.append(scoped)
        return found

    def merge(
        self,
        alias: record.AliasRecord,
        command: str | _typing.Sequence[str] | None = None,
    ) -> dict[str, _typing.Any]:
        """
        Merge an alias's base options with its command-scoped overrides.

        Args:
            alias: Resolved alias record.
            command: Command being executed, as a token list or a
                     ``"sql:sync"`` style name.

        Returns:
            New option dict without the ``command`` key.
        """
        result = {
            key: _copy.deepcopy(value)
            for key, value in alias.options.items()
            if key != COMMAND_KEY
        }
        for scoped in self.overrides(alias.options, command_path(command)):
            for key, value in scoped.items():
                result[key] = _copy.deepcopy(value)
        return result


def merge(
    alias: record.AliasRecord,
    command: str | _typing.Sequence[str] | None = None,
) -> dict[str, _typing.Any]:
    """Merge options for a command using a default OptionMerger."""
    return OptionMerger().merge(alias, command)
