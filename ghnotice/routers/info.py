"""Ruter Ingfo?"""

from __future__ import annotations

from textwrap import dedent

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from ghnotice.events import EventKind

router = APIRouter()


def render_help_text(request: Request) -> str:
    state = request.app.state
    registry = state.registry
    kinds = ", ".join(k.value for k in EventKind)
    return dedent(
        f"""
    GitHub → Notice receiver (HTTP Help)

    Endpoints
    ---------
    - GET  /         : Health check
    - GET  /help     : This text
    - POST /webhook  : GitHub webhook (JSON or form payload)

    Events
    ------
    {kinds}

    Status
    ------
    feeds: {len(registry.feeds)}
    known repositories: {len(registry.known_repos)}
    repository gate: {"on" if registry.gate_enabled else "off"}
    unknown repository policy: {state.settings.unknown_repo_policy}
    """
    ).strip()


@router.get("/", response_class=PlainTextResponse)
def root():
    """
    Simple liveness endpoint.
    """
    return "ok"


@router.get("/help", response_class=PlainTextResponse)
def http_help(request: Request):
    """
    HTTP help endpoint.
    Returns a plaintext cheat sheet of endpoints and the running configuration.
    """
    return render_help_text(request)
