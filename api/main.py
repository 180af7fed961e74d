"""
Kaizen API — Main Application

POST /validate       — Classify one field (topic, audience, edit_instruction)
POST /validate/form  — Submit-time check: audience, then topic, first blocker wins
POST /generate       — Generate a post (gated on both fields)
POST /edit           — Edit a post or a selected passage (gated on the instruction)
POST /suggest        — Autocomplete a topic (gated, silent on failure)
GET  /models         — Selectable generation models
GET  /thresholds     — Channel length bands and vocabulary sizes
GET  /health         — Health check
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.requests import Request

from kaizen.cache import suggestion_cache
from kaizen.catalog import describe_blocker, inline_hint, too_long_hint
from kaizen.classifier import Channel, Verdict, classifier
from kaizen.composer import (
    GENERATION_MODELS,
    InputRejected,
    edit_post,
    generate_post,
    suggest_completion,
)
from kaizen.config import settings
from kaizen.llm.factory import get_provider
from kaizen.logging import get_logger, setup_logging
from kaizen.rate_limit import check_rate_limit
from kaizen.schemas.post import (
    EditRequest,
    FormValidateRequest,
    FormValidateResponse,
    GenerateRequest,
    HealthResponse,
    ModelsResponse,
    PostResponse,
    RejectionResponse,
    SuggestRequest,
    SuggestResponse,
    ThresholdsResponse,
    ValidateRequest,
    ValidateResponse,
)
from kaizen.session import FormSession, effective_debounce_ms, should_autocomplete

logger = get_logger("api")


# ============================================================
# STARTUP / SHUTDOWN
# ============================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    if not settings.GEMINI_API_KEY:
        logger.warning(
            "GEMINI_API_KEY not set; validation works but generation routes will fail."
        )
    logger.info("Kaizen API starting")
    yield
    logger.info("Kaizen API shutting down")


app = FastAPI(
    title="Kaizen API",
    description="LinkedIn post generation with heuristic input screening",
    version=settings.VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",")],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    allow_credentials=False,
)


# ============================================================
# ERROR HANDLERS
# ============================================================

@app.exception_handler(InputRejected)
async def input_rejected_handler(request: Request, exc: InputRejected):
    return JSONResponse(status_code=422, content=exc.to_dict())


@app.exception_handler(Exception)
async def global_error_handler(request: Request, exc: Exception):
    """Catch unhandled exceptions — return structured error, don't leak internals."""
    logger.error(
        f"Unhandled exception: {type(exc).__name__}",
        extra={"error": str(exc), "path": request.url.path, "method": request.method},
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error."},
    )


# Lazy LLM provider
_llm = None


def _get_llm():
    global _llm
    if _llm is None:
        _llm = get_provider(settings.LLM_PROVIDER)
    return _llm


def _client_id(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


# ============================================================
# VALIDATION ROUTES (no LLM, not rate limited)
# ============================================================

@app.post("/validate", response_model=ValidateResponse)
async def validate_field(request: ValidateRequest):
    """Classify one field and render its descriptor."""
    channel = Channel(request.channel)
    verdict = classifier.classify(channel, request.text)
    too_long = classifier.exceeds_max_length(channel, request.text)

    error = describe_blocker(verdict, channel, too_long)
    hint = too_long_hint(channel) if too_long else inline_hint(verdict, channel, request.text)

    return {
        "channel": channel.value,
        "verdict": verdict.value,
        "safe": verdict is Verdict.SAFE and not too_long,
        "too_long": too_long,
        "inline_hint": hint,
        "error": error.to_dict() if error else None,
    }


@app.post("/validate/form", response_model=FormValidateResponse)
async def validate_form(request: FormValidateRequest):
    """Submit-time validation of the topic + audience form."""
    session = FormSession()
    session.on_input(Channel.TOPIC, request.topic)
    session.on_input(Channel.AUDIENCE, request.audience)
    outcome = session.submit()

    if not outcome.allowed:
        logger.info(
            "Form submission blocked",
            extra={
                "field": outcome.blocking_field.value,
                "verdict": "too_long" if outcome.too_long else outcome.verdict.value,
            },
        )

    return {
        "allowed": outcome.allowed,
        "blocking_field": outcome.blocking_field.value if outcome.blocking_field else None,
        "verdict": outcome.verdict.value if outcome.verdict else None,
        "too_long": outcome.too_long,
        "error": outcome.error.to_dict() if outcome.error else None,
        "inline": outcome.inline,
    }


# ============================================================
# GENERATION ROUTES (LLM, rate limited)
# ============================================================

@app.post("/generate", response_model=PostResponse,
          responses={422: {"model": RejectionResponse}})
async def generate(request: GenerateRequest, http_request: Request):
    """Generate a LinkedIn post from a topic and audience."""
    check_rate_limit(_client_id(http_request))
    start = time.time()

    result = await generate_post(
        topic=request.topic,
        audience=request.audience,
        llm=_get_llm(),
        tone=request.tone,
        length=request.length,
        hook_style=request.hook_style,
        model=request.model,
    )
    if "error" in result:
        raise HTTPException(502, "LLM provider temporarily unavailable. Please try again.")

    logger.info(
        "Generate complete",
        extra={
            "duration_ms": int((time.time() - start) * 1000),
            "tone": request.tone,
            "model": request.model,
        },
    )
    return result


@app.post("/edit", response_model=PostResponse,
          responses={422: {"model": RejectionResponse}})
async def edit(request: EditRequest, http_request: Request):
    """Apply a preset edit or rewrite a selected passage."""
    check_rate_limit(_client_id(http_request))

    try:
        result = await edit_post(
            current_text=request.current_text,
            action=request.action,
            topic=request.topic,
            llm=_get_llm(),
            selected_text=request.selected_text,
            instruction=request.instruction,
        )
    except ValueError as e:
        raise HTTPException(400, str(e))

    if "error" in result:
        raise HTTPException(502, "Edit failed. Please try again.")
    return result


@app.post("/suggest", response_model=SuggestResponse)
async def suggest(request: SuggestRequest, http_request: Request):
    """Autocomplete a topic. Empty suggestion when gated or on failure."""
    # Gated prefixes cost no model call and are not charged to the limit
    if not should_autocomplete(request.text):
        return {"suggestion": ""}
    check_rate_limit(_client_id(http_request))
    suggestion = await suggest_completion(request.text, llm=_get_llm())
    return {"suggestion": suggestion}


# ============================================================
# META
# ============================================================

@app.get("/models", response_model=ModelsResponse)
async def models():
    """Generation models a request may select."""
    return {
        "default": settings.GEMINI_MODEL,
        "models": [
            {"value": name, "description": desc} for name, desc in GENERATION_MODELS.items()
        ],
    }


@app.get("/thresholds", response_model=ThresholdsResponse)
async def thresholds():
    """Channel length bands and detector vocabulary sizes."""
    return {
        "channels": {
            ch.value: {"min_length": t.min_length, "max_length": t.max_length}
            for ch, t in classifier.thresholds.items()
        },
        "vocabulary": classifier.vocabulary.sizes(),
        "autocomplete_min_chars": settings.AUTOCOMPLETE_MIN_CHARS,
        "debounce_ms": effective_debounce_ms(),
    }


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check."""
    return {
        "status": "operational",
        "version": settings.VERSION,
        "llm_provider": settings.LLM_PROVIDER,
        "llm_configured": bool(settings.GEMINI_API_KEY),
        "suggestion_cache": suggestion_cache.stats,
    }


# --- Security + Version Headers Middleware ---
@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Kaizen-Version"] = settings.VERSION
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


# --- Body Size Limit Middleware ---
_MAX_BODY_BYTES = 262_144  # 256 KB


@app.middleware("http")
async def enforce_body_size_limit(request: Request, call_next):
    """Reject oversized bodies, by Content-Length and by actual size."""
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > _MAX_BODY_BYTES:
        return JSONResponse(status_code=413, content={"detail": "Request body too large."})

    if request.method in ("POST", "PUT", "PATCH"):
        body = await request.body()
        if len(body) > _MAX_BODY_BYTES:
            return JSONResponse(status_code=413, content={"detail": "Request body too large."})

    return await call_next(request)


# --- Request Logging Middleware ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every API request with method, path, status, duration."""
    path = request.url.path
    if path == "/health":
        return await call_next(request)

    start = time.time()
    response = await call_next(request)
    duration_ms = round((time.time() - start) * 1000, 1)

    logger.info(
        f"{request.method} {path} → {response.status_code} ({duration_ms}ms)",
        extra={
            "method": request.method,
            "path": path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )
    return response


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host=settings.HOST, port=settings.PORT)
