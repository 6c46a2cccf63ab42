"""
Credential providers
====================
Where the username/password for the login step come from.

Providers:
    - ``InteractiveCredentials`` — terminal prompt (password via ``getpass``)
    - ``EnvCredentials``         — ``{PREFIX}_USERNAME`` / ``{PREFIX}_PASSWORD``
    - ``StaticCredentials``      — values supplied up front (tests, embedding)

Security:
    - Credentials are never logged or written to disk.
"""

from __future__ import annotations

import getpass
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable

from note_scout.errors import LoginFailure


@dataclass
class Credentials:
    """Plain credential container, resolved once per run."""
    username: str = ""
    password: str = field(default="", repr=False)

    @property
    def is_complete(self) -> bool:
        return bool(self.username and self.password)


class CredentialProvider(ABC):
    """Produces :class:`Credentials` for the login step."""

    @abstractmethod
    def get_credentials(self) -> Credentials:
        """Return complete credentials or raise :class:`LoginFailure`."""
        ...


class StaticCredentials(CredentialProvider):
    def __init__(self, username: str, password: str) -> None:
        self._creds = Credentials(username, password)

    def get_credentials(self) -> Credentials:
        if not self._creds.is_complete:
            raise LoginFailure("username and password must both be set")
        return self._creds


class EnvCredentials(CredentialProvider):
    """Reads ``{prefix}_USERNAME`` and ``{prefix}_PASSWORD``."""

    def __init__(self, prefix: str = "HACKMD") -> None:
        self.prefix = prefix

    def get_credentials(self) -> Credentials:
        creds = Credentials(
            os.environ.get(f"{self.prefix}_USERNAME", "").strip(),
            os.environ.get(f"{self.prefix}_PASSWORD", ""),
        )
        if not creds.is_complete:
            raise LoginFailure(
                f"set {self.prefix}_USERNAME and {self.prefix}_PASSWORD to log in"
            )
        return creds


class InteractiveCredentials(CredentialProvider):
    """Prompts on the terminal; blocks until both values are entered."""

    def __init__(
        self,
        service_name: str = "HackMD",
        *,
        input_func: Callable[[str], str] = input,
        password_func: Callable[[str], str] = getpass.getpass,
    ) -> None:
        self.service_name = service_name
        self._input = input_func
        self._password = password_func

    def get_credentials(self) -> Credentials:
        try:
            username = self._input(f"{self.service_name} user: ").strip()
            password = self._password(f"{self.service_name} password: ")
        except EOFError as exc:
            raise LoginFailure("unable to read credentials from the terminal") from exc
        creds = Credentials(username, password)
        if not creds.is_complete:
            raise LoginFailure("username and password must both be entered")
        return creds


__all__ = [
    "Credentials",
    "CredentialProvider",
    "StaticCredentials",
    "EnvCredentials",
    "InteractiveCredentials",
]
