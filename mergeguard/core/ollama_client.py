# mergeguard/core/ollama_client.py
import json
from typing import Any, Dict, Optional

import httpx
import structlog
from pydantic import ValidationError

from mergeguard.api.schemas import RiskReport
from mergeguard.config import Settings
from mergeguard.core.exceptions import InferenceError
from mergeguard.core.prompts import build_messages

log = structlog.get_logger(__name__)

DEFAULT_MODEL = "gemma3:1b"

NO_OUTPUT_REASON = "No model output"
INVALID_JSON_REASON = "Invalid JSON"
UNPARSEABLE_REASON = "Model did not return valid JSON (prompt/output mismatch)."
UNPARSEABLE_TEST = "Adjust prompt to enforce JSON-only output."

# lowercased JSON key -> RiskReport field
_REPORT_FIELDS = {
    "riskscore": "risk_score",
    "risklevel": "risk_level",
    "reasons": "reasons",
    "recommendedtests": "recommended_tests",
}


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    """Shared client for the process lifetime; base URL points at the Ollama API root."""
    return httpx.AsyncClient(
        base_url=settings.OLLAMA_BASE_URL,
        timeout=httpx.Timeout(settings.OLLAMA_TIMEOUT_SECONDS),
    )


def _fallback_report(reason: str, test: Optional[str] = None) -> RiskReport:
    return RiskReport(
        risk_score=0,
        risk_level="Low",
        reasons=[reason],
        recommended_tests=[test] if test else [],
    )


def parse_report(content: Optional[str]) -> RiskReport:
    """Turn the model's message content into a RiskReport, never raising."""
    if content is None or not content.strip():
        return _fallback_report(NO_OUTPUT_REASON)

    try:
        data = json.loads(content)
    except ValueError:
        return _fallback_report(UNPARSEABLE_REASON, UNPARSEABLE_TEST)

    if data is None:
        return _fallback_report(INVALID_JSON_REASON)
    if not isinstance(data, dict):
        return _fallback_report(UNPARSEABLE_REASON, UNPARSEABLE_TEST)

    fields: Dict[str, Any] = {}
    for key, value in data.items():
        name = _REPORT_FIELDS.get(key.lower())
        if name is not None and value is not None:
            fields[name] = value
    if not fields:
        return _fallback_report(INVALID_JSON_REASON)

    try:
        # JSON "42", true or 42.0 are not an integer score
        return RiskReport.model_validate(fields, strict=True)
    except ValidationError:
        return _fallback_report(UNPARSEABLE_REASON, UNPARSEABLE_TEST)


class OllamaRiskClient:
    def __init__(self, http: httpx.AsyncClient, settings: Settings):
        self.http = http
        self.model = settings.OLLAMA_MODEL or DEFAULT_MODEL

    async def health_check(self) -> bool:
        try:
            # lists locally pulled models
            resp = await self.http.get("/tags")
            return resp.is_success
        except httpx.HTTPError as e:
            log.warning("ollama_health_check_failed", error=str(e))
            return False

    async def chat(self, messages: list) -> Optional[str]:
        """Non-streaming /api/chat call, returning ``message.content``."""
        body = {"model": self.model, "messages": messages, "stream": False}
        try:
            resp = await self.http.post("/chat", json=body)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise InferenceError(
                f"Ollama returned {e.response.status_code} for /chat",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise InferenceError(f"Ollama request failed: {e}") from e

        try:
            content = resp.json()["message"]["content"]
        except (ValueError, KeyError, TypeError) as e:
            raise InferenceError("Ollama response has no message content") from e
        if content is not None and not isinstance(content, str):
            raise InferenceError("Ollama message content is not a string")
        return content

    async def analyze(self, change_text: str) -> RiskReport:
        content = await self.chat(build_messages(change_text))
        report = parse_report(content)
        log.info(
            "risk_analysis_complete",
            model=self.model,
            risk_score=report.risk_score,
            risk_level=report.risk_level,
        )
        return report
