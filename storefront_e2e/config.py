from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from .browser import DEFAULT_STORE_PATH
from .store_api import DEFAULT_API_PREFIX


REQUIRED_KEYS = [
    "STORE_BASE_URL",
    "STORE_USERNAME",
    "STORE_PASSWORD",
]

OPTIONAL_KEYS = [
    "STORE_API_TOKEN",
    "STORE_ROLE",
    "STORE_CDP_URL",
    "STORE_PATH",
    "STORE_API_PREFIX",
]


@dataclass(frozen=True)
class Config:
    base_url: str
    username: str
    password: str
    api_token: str = ""
    role: str = "consumer"
    cdp_url: str | None = None
    store_path: str = DEFAULT_STORE_PATH
    api_prefix: str = DEFAULT_API_PREFIX

    @staticmethod
    def load_from_env(env: Mapping[str, str] | None = None) -> "Config":
        """Resolve the runner configuration.

        Only the CLI calls this; everything below it is handed a Config.
        """
        if env is None:
            env = os.environ

        values: dict[str, str] = {}
        for k in REQUIRED_KEYS:
            if k not in env:
                raise RuntimeError(f"Missing environment variable: {k}")
            val = env[k]
            if not val or val.strip() in {"PLACEHOLDER", "MASKED", ""}:
                raise RuntimeError(f"Environment variable {k} is still a placeholder")
            values[k] = val

        return Config(
            base_url=values["STORE_BASE_URL"].rstrip("/"),
            username=values["STORE_USERNAME"],
            password=values["STORE_PASSWORD"],
            api_token=env.get("STORE_API_TOKEN", ""),
            role=env.get("STORE_ROLE") or "consumer",
            cdp_url=env.get("STORE_CDP_URL") or None,
            store_path=env.get("STORE_PATH") or DEFAULT_STORE_PATH,
            api_prefix=env.get("STORE_API_PREFIX") or DEFAULT_API_PREFIX,
        )
