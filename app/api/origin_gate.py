# app/api/origin_gate.py
from __future__ import annotations

import enum
import logging
from typing import Iterable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.api.errors import GENERIC_SERVER_ERROR, error_body

logger = logging.getLogger("helphub.cors")

ALLOW_METHODS = "GET,POST,OPTIONS"
ALLOW_HEADERS = "Content-Type,Authorization"


class OriginDecision(str, enum.Enum):
    ECHO = "echo"  # allowed, echo the origin back
    ALLOW = "allow"  # allowed, no Origin header (server-to-server caller)
    REJECT = "reject"


class OriginGate:
    """
    Stateless origin check over a fixed allow-list.

    An empty allow-list accepts every origin. That is meant for local
    testing and is unsafe in production.
    """

    def __init__(self, allowed: Iterable[str]):
        self.allowed = frozenset(o.strip().rstrip("/") for o in allowed if o and o.strip())

    @property
    def permissive(self) -> bool:
        return not self.allowed

    def decide(self, origin: Optional[str]) -> OriginDecision:
        if not origin:
            return OriginDecision.ALLOW
        if self.permissive or origin.strip().rstrip("/") in self.allowed:
            return OriginDecision.ECHO
        return OriginDecision.REJECT


class OriginGateMiddleware(BaseHTTPMiddleware):
    """
    Runs the gate before routing.

    - every response: Allow-Methods / Allow-Headers
    - ECHO: Access-Control-Allow-Origin=<origin>, Vary: Origin
    - REJECT: 403, empty body, handler never called
    - OPTIONS preflight: 200, empty body
    - unhandled route exception: 500 {"ok": false, "error": "Server error"}
    """

    def __init__(self, app, gate: OriginGate):
        super().__init__(app)
        self.gate = gate

    async def dispatch(self, request: Request, call_next):
        origin = request.headers.get("origin")
        logger.debug("Incoming Origin: %s", origin)
        decision = self.gate.decide(origin)

        if decision is OriginDecision.REJECT:
            logger.warning("rejected origin %s on %s %s", origin, request.method, request.url.path)
            response = Response(status_code=403)
        elif request.method == "OPTIONS":
            response = Response(status_code=200)
        else:
            try:
                response = await call_next(request)
            except Exception as exc:
                # 500s carry the CORS headers too
                logger.exception("UNHANDLED_EXC: %s", exc)
                response = JSONResponse(status_code=500, content=error_body(GENERIC_SERVER_ERROR))

        response.headers["Access-Control-Allow-Methods"] = ALLOW_METHODS
        response.headers["Access-Control-Allow-Headers"] = ALLOW_HEADERS
        if decision is OriginDecision.ECHO:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
        return response
