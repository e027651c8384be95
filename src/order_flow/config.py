"""Runtime settings, read from the environment.

Variables:
    ORDER_FLOW_ENGINE        'camunda' or 'memory' (default: camunda)
    CAMUNDA_REST_URL         Camunda REST root (default: http://localhost:8080/engine-rest)
    ORDER_FLOW_PROCESS_KEY   Process definition key (default: order)
    ORDER_FLOW_HTTP_TIMEOUT  Request timeout in seconds (default: 30)
    ORDER_FLOW_MAX_RETRIES   Attempts for idempotent queries (default: 3)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from .domain.models import ORDER_PROCESS_KEY
from .infra.camunda import DEFAULT_BASE_URL


@dataclass(frozen=True)
class WorkflowSettings:
    engine: str = "camunda"
    base_url: str = DEFAULT_BASE_URL
    process_key: str = ORDER_PROCESS_KEY
    timeout: float = 30
    max_retries: int = 3

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> WorkflowSettings:
        env = os.environ if environ is None else environ
        try:
            timeout = float(env.get("ORDER_FLOW_HTTP_TIMEOUT", cls.timeout))
            max_retries = int(env.get("ORDER_FLOW_MAX_RETRIES", cls.max_retries))
        except ValueError as exc:
            raise ValueError(f"Invalid numeric setting: {exc}") from exc
        return cls(
            engine=env.get("ORDER_FLOW_ENGINE", cls.engine).lower(),
            base_url=env.get("CAMUNDA_REST_URL", cls.base_url),
            process_key=env.get("ORDER_FLOW_PROCESS_KEY", cls.process_key),
            timeout=timeout,
            max_retries=max_retries,
        )

    def client_kwargs(self) -> dict:
        """Constructor arguments for the configured engine adapter."""
        if self.engine == "camunda":
            return {
                "base_url": self.base_url,
                "timeout": self.timeout,
                "max_retries": self.max_retries,
            }
        return {}
