# mergeguard/api/schemas.py
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, List, Optional

from mergeguard.core.payload import get_int, get_string

HANDLED_ACTIONS = ("opened", "synchronize", "reopened")


class RiskReport(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    risk_score: int = 0  # 0-100, not enforced
    risk_level: str = "Low"  # Low|Medium|High
    reasons: List[str] = Field(default_factory=list)
    recommended_tests: List[str] = Field(default_factory=list)


class PullRequestEvent(BaseModel):
    event_name: str
    delivery_id: str = ""
    action: str = "unknown"
    owner: Optional[str] = None
    repo: Optional[str] = None
    pr_number: Optional[int] = None
    head_sha: Optional[str] = None
    diff: Optional[str] = None

    @classmethod
    def from_payload(cls, event_name: str, delivery_id: str, doc: Any) -> "PullRequestEvent":
        return cls(
            event_name=event_name,
            delivery_id=delivery_id,
            action=get_string(doc, "action") or "unknown",
            owner=get_string(doc, "repository", "owner", "login"),
            repo=get_string(doc, "repository", "name"),
            pr_number=get_int(doc, "number"),
            head_sha=get_string(doc, "pull_request", "head", "sha"),
            diff=get_string(doc, "diff"),
        )

    @property
    def repo_slug(self) -> Optional[str]:
        if self.owner is None or self.repo is None:
            return None
        return f"{self.owner}/{self.repo}"

    @property
    def is_handled_action(self) -> bool:
        return self.action.lower() in HANDLED_ACTIONS

    @property
    def has_diff(self) -> bool:
        return bool(self.diff and self.diff.strip())


class WebhookResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    ok: bool = True
    ignored: Optional[bool] = None
    event_name: Optional[str] = None
    delivery_id: Optional[str] = None
    action: Optional[str] = None
    repo: Optional[str] = None
    pr_number: Optional[int] = None
    head_sha: Optional[str] = None
    reason: Optional[str] = None
    message: Optional[str] = None
    risk: Optional[RiskReport] = None
