"""Application configuration for Medline retrieval."""

from typing import Optional

import requests
from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from medline_retrieval.clients.base import DEFAULT_HEADERS
from medline_retrieval.clients.efetch import EFETCH_URL
from medline_retrieval.clients.esearch import ESEARCH_URL


class MedlineConfig(BaseSettings):  # type: ignore[misc]
    """Settings controlling E-utilities endpoints and HTTP behavior."""

    search_url: AnyHttpUrl = Field(ESEARCH_URL, description="E-utilities esearch endpoint")
    fetch_url: AnyHttpUrl = Field(EFETCH_URL, description="E-utilities efetch endpoint")
    request_timeout_s: float = Field(
        30.0, description="Timeout (in seconds) applied to each outbound HTTP request"
    )
    user_agent: str = Field("medline-retrieval", description="User-Agent header sent upstream")
    debug_logging: bool = Field(False, description="Log every outgoing request at DEBUG level")

    model_config = SettingsConfigDict(env_prefix="MEDLINE_", env_file=".env", extra="ignore")

    @field_validator("request_timeout_s")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("request_timeout_s must be positive")
        return value

    def build_session(self, session: Optional[requests.Session] = None) -> requests.Session:
        """Return a :class:`requests.Session` sending XML Accept and User-Agent headers."""

        session = session or requests.Session()
        session.headers.update(DEFAULT_HEADERS)
        if self.user_agent:
            session.headers["User-Agent"] = self.user_agent
        return session
