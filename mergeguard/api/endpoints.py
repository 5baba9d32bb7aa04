# mergeguard/api/endpoints.py
import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, Response
from starlette.requests import ClientDisconnect

from mergeguard.api.schemas import PullRequestEvent, WebhookResponse
from mergeguard.config import Settings, settings as app_settings
from mergeguard.core.cancellation import cancel_on_disconnect
from mergeguard.core.ollama_client import OllamaRiskClient
from mergeguard.core.payload import parse_payload
from mergeguard.core.signature import verify_signature

log = structlog.get_logger(__name__)

router = APIRouter()

NO_DIFF_MESSAGE = (
    "No 'diff' provided in payload. Real GitHub PR webhooks do not include diffs. "
    "Implement PR file fetching next."
)

# nginx "client closed request"
CLIENT_CLOSED_REQUEST = 499


def get_settings() -> Settings:
    return app_settings


def get_risk_client(request: Request) -> OllamaRiskClient:
    return request.app.state.risk_client


@router.post("/github", response_model=WebhookResponse, response_model_exclude_none=True)
async def github_webhook(
    request: Request,
    settings: Settings = Depends(get_settings),
    risk_client: OllamaRiskClient = Depends(get_risk_client),
):
    structlog.contextvars.clear_contextvars()
    try:
        body = await request.body()
    except ClientDisconnect:
        log.info("webhook_client_disconnected", stage="body")
        return Response(status_code=CLIENT_CLOSED_REQUEST)

    event_name = request.headers.get("X-GitHub-Event", "")
    delivery_id = request.headers.get("X-GitHub-Delivery", "")
    signature = request.headers.get("X-Hub-Signature-256", "")

    structlog.contextvars.bind_contextvars(event_name=event_name, delivery_id=delivery_id)
    log.info("webhook_received")

    secret = settings.GITHUB_WEBHOOK_SECRET
    if not secret or not secret.strip():
        log.error("webhook_secret_missing")
        return PlainTextResponse("Missing GITHUB_WEBHOOK_SECRET in configuration.", status_code=500)

    if not verify_signature(body, secret, signature):
        log.warning("webhook_signature_invalid")
        return PlainTextResponse("Invalid signature.", status_code=401)

    doc = parse_payload(body)

    if event_name.lower() != "pull_request":
        return WebhookResponse(ignored=True, event_name=event_name)

    event = PullRequestEvent.from_payload(event_name, delivery_id, doc)
    log.info(
        "pull_request_event",
        action=event.action,
        repo=event.repo_slug,
        pr_number=event.pr_number,
        head_sha=event.head_sha,
    )

    if not event.is_handled_action:
        return WebhookResponse(
            ignored=True,
            reason=f"Action '{event.action}' not handled",
            action=event.action,
            repo=event.repo_slug,
            pr_number=event.pr_number,
            head_sha=event.head_sha,
        )

    if not event.has_diff:
        return WebhookResponse(
            action=event.action,
            repo=event.repo_slug,
            pr_number=event.pr_number,
            head_sha=event.head_sha,
            message=NO_DIFF_MESSAGE,
        )

    try:
        report = await cancel_on_disconnect(request, risk_client.analyze(event.diff))
    except ClientDisconnect:
        log.info("webhook_client_disconnected", stage="analysis")
        return Response(status_code=CLIENT_CLOSED_REQUEST)

    return WebhookResponse(
        event_name=event_name,
        delivery_id=delivery_id,
        action=event.action,
        repo=event.repo_slug,
        pr_number=event.pr_number,
        head_sha=event.head_sha,
        risk=report,
    )
