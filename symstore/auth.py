"""Bearer token sources for the symbol server API.

Interactive login lives outside this package; it is expected to leave a token
where a :class:`TokenProvider` can pick it up.
"""

from __future__ import annotations

import os
from typing import Protocol

from symstore.exceptions import AuthError


class TokenProvider(Protocol):
    def get_bearer_token(self) -> str:  # raises AuthError
        ...


class EnvTokenProvider:
    def __init__(self, env_var: str = "SYMBOLS_TOKEN") -> None:
        self.env_var = env_var

    def get_bearer_token(self) -> str:
        token = os.getenv(self.env_var, "").strip()
        if not token:
            raise AuthError(
                f"Environment variable '{self.env_var}' is required to upload to the symbol server",
                {"setting": self.env_var},
            )
        return token


class StaticTokenProvider:
    def __init__(self, token: str) -> None:
        self.token = token

    def get_bearer_token(self) -> str:
        if not self.token:
            raise AuthError("Empty bearer token")
        return self.token


__all__ = ["TokenProvider", "EnvTokenProvider", "StaticTokenProvider"]
