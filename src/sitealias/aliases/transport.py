"""
Local/remote classification of resolved aliases.

An alias is remote if and only if it has a non-empty ``host``. Remote
aliases yield a ConnectionSpec with everything an external ssh or rsync
invocation needs; this module never runs those tools itself.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import platform as _platform
import shlex as _shlex
import typing as _typing

import sitealias.aliases.record as record
import sitealias.constants as constants


def local_os() -> str:
    """OS tag of the machine running this process."""
    if _platform.system() == "Windows":
        return constants.OS_WINDOWS
    return constants.OS_LINUX


@_dataclasses.dataclass(frozen=True)
class ConnectionSpec:
    """Connection parameters for a remote alias."""

    host: str
    user: str | None = None
    ssh_options: str | None = None
    os: str = constants.DEFAULT_REMOTE_OS

    @property
    def target(self) -> str:
        """``user@host``, or just ``host`` when no user is set."""
        if self.user:
            return f"{self.user}@{self.host}"
        return self.host

    @property
    def is_windows(self) -> bool:
        return self.os == constants.OS_WINDOWS

    def ssh_args(
        self,
        command: _typing.Sequence[str] = (),
        *,
        ssh_command: str = constants.DEFAULT_SSH_COMMAND,
    ) -> list[str]:
        """
        Build the argv for running a command over ssh.

        Args:
            command: Remote command tokens (quoted for the remote shell).
            ssh_command: ssh client executable.

        Returns:
            Argument list suitable for subprocess.
        """
        args = [ssh_command]
        if self.ssh_options:
            args.extend(_shlex.split(self.ssh_options))
        args.append(self.target)
        if command:
            args.append(_shlex.join(command))
        return args

    def remote_path(self, path: str) -> str:
        """rsync-style remote path, e.g. ``user@host:/var/www``."""
        return f"{self.target}:{path}"

    def to_dict(self) -> dict[str, _typing.Any]:
        return {
            "host": self.host,
            "user": self.user,
            "ssh_options": self.ssh_options,
            "os": self.os,
            "target": self.target,
        }


@_dataclasses.dataclass(frozen=True)
class Local:
    """An alias executed on this machine."""

    root: str | None = None
    uri: str | None = None
    os: str = _dataclasses.field(default_factory=local_os)
    no_target: bool = False
    """True for @none: there is no site to act on."""

    is_remote: _typing.ClassVar[bool] = False

    def to_dict(self) -> dict[str, _typing.Any]:
        return {
            "transport": "local",
            "root": self.root,
            "uri": self.uri,
            "os": self.os,
            "no_target": self.no_target,
        }


@_dataclasses.dataclass(frozen=True)
class Remote:
    """An alias executed on another machine through ssh."""

    connection: ConnectionSpec
    root: str | None = None
    uri: str | None = None

    is_remote: _typing.ClassVar[bool] = True

    def to_dict(self) -> dict[str, _typing.Any]:
        return {
            "transport": "remote",
            "root": self.root,
            "uri": self.uri,
            **self.connection.to_dict(),
        }


Classification = Local | Remote


class TransportClassifier:
    """Classifies alias records as Local or Remote."""

    def classify(
        self,
        alias: record.AliasRecord,
        options: _typing.Mapping[str, _typing.Any] | None = None,
    ) -> Classification:
        """
        Classify an alias.

        Args:
            alias: Resolved alias record.
            options: Effective options (e.g. from OptionMerger). Defaults
                     to the record's own option-map.

        Returns:
            Remote with a ConnectionSpec if a host is set, otherwise Local.
        """
        if options is None:
            options = alias.options

        if alias.is_none:
            return Local(no_target=True)

        host = options.get("host")
        if host:
            return Remote(
                connection=ConnectionSpec(
                    host=str(host),
                    user=options.get("user") or None,
                    ssh_options=options.get("ssh-options") or None,
                    os=options.get("os") or constants.DEFAULT_REMOTE_OS,
                ),
                root=options.get("root"),
                uri=options.get("uri"),
            )

        return Local(
            root=options.get("root"),
            uri=options.get("uri"),
            os=options.get("os") or local_os(),
        )


def classify(alias: record.AliasRecord) -> Classification:
    """Classify an alias using a default TransportClassifier."""
    return TransportClassifier().classify(alias)
