# mergeguard/main.py
from fastapi import Depends, FastAPI, Request
from fastapi.responses import PlainTextResponse
from mergeguard.config import settings
from mergeguard.core.logger import setup_logging
from mergeguard.core.exceptions import InferenceError, PayloadError
from mergeguard.core.ollama_client import OllamaRiskClient, create_http_client
from mergeguard.api.endpoints import get_risk_client, router as webhook_router

log = setup_logging(settings.LOG_LEVEL, settings.APP_ENV, settings.APP_NAME)
app = FastAPI(
    title="MergeGuard API",
    version="1.0.0",
    docs_url="/api/docs",
    openapi_url="/api/openapi.json",
)

@app.on_event("startup")
async def on_startup():
    app.state.http_client = create_http_client(settings)
    app.state.risk_client = OllamaRiskClient(app.state.http_client, settings)
    log.info("startup", ollama_base_url=settings.OLLAMA_BASE_URL, model=app.state.risk_client.model)

@app.on_event("shutdown")
async def on_shutdown():
    await app.state.http_client.aclose()

@app.exception_handler(PayloadError)
async def payload_error_handler(request: Request, exc: PayloadError):
    log.error("webhook_payload_malformed", error=str(exc))
    return PlainTextResponse(str(exc), status_code=500)

@app.exception_handler(InferenceError)
async def inference_error_handler(request: Request, exc: InferenceError):
    log.error("inference_failed", error=str(exc), upstream_status=exc.status_code)
    return PlainTextResponse(str(exc), status_code=502)

@app.get("/health")
async def health():
    return {"status": "healthy", "service": settings.APP_NAME}

@app.get("/health/deep")
async def deep_health(risk_client: OllamaRiskClient = Depends(get_risk_client)):
    ok = await risk_client.health_check()
    return {"api": "ok", "ollama": "ok" if ok else "degraded"}

app.include_router(webhook_router, prefix="/webhook", tags=["webhooks"])
