from __future__ import annotations

from dataclasses import dataclass

from .http_client import DEFAULT_USER_AGENT, HttpClient, build_session
from .urls import SITE


@dataclass
class SourceConfig:
    site: str = SITE
    timeout_s: int = 45
    max_retries: int = 4
    backoff_base_s: float = 1.0
    user_agent: str = DEFAULT_USER_AGENT

    def http_client(self) -> HttpClient:
        return HttpClient(
            build_session(self.user_agent),
            timeout_s=self.timeout_s,
            max_retries=self.max_retries,
            backoff_base_s=self.backoff_base_s,
        )
