import json
import logging
import threading
import time
import uuid
from collections import defaultdict
from typing import DefaultDict

from fastapi import Request
from jose import jwt
from starlette.middleware.base import BaseHTTPMiddleware


logger = logging.getLogger("riders_api.observability")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


class MetricsRegistry:
    """Request counters and latency sums, rendered in Prometheus text format."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.requests: DefaultDict[tuple[str, str, int], int] = defaultdict(int)
        self.duration_ms_sum: DefaultDict[tuple[str, str], float] = defaultdict(float)

    def observe(self, method: str, route: str, status_code: int, duration_ms: float) -> None:
        with self._lock:
            self.requests[(route, method, status_code)] += 1
            self.duration_ms_sum[(route, method)] += duration_ms

    def render_prometheus(self) -> str:
        lines = [
            "# HELP riders_http_requests_total HTTP requests by route, method and status code.",
            "# TYPE riders_http_requests_total counter",
        ]
        with self._lock:
            for (route, method, status_code), count in sorted(self.requests.items()):
                lines.append(
                    f'riders_http_requests_total{{route="{route}",method="{method}",status="{status_code}"}} {count}'
                )
            lines.append("# HELP riders_http_request_duration_ms_sum Total time spent per route and method.")
            lines.append("# TYPE riders_http_request_duration_ms_sum counter")
            for (route, method), total in sorted(self.duration_ms_sum.items()):
                lines.append(
                    f'riders_http_request_duration_ms_sum{{route="{route}",method="{method}"}} {total:.3f}'
                )
        return "\n".join(lines) + "\n"


def _token_subject(request: Request) -> str | None:
    auth = request.headers.get("authorization", "")
    if not auth.startswith("Bearer "):
        return None
    try:
        claims = jwt.get_unverified_claims(auth[7:].strip())
    except Exception:
        return None
    sub = claims.get("sub")
    return str(sub) if sub else None


def _route_template(request: Request) -> str:
    # path template keeps ids out of the metric labels
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class ObservabilityMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, registry: MetricsRegistry, exclude_paths: set[str] | None = None) -> None:
        super().__init__(app)
        self.registry = registry
        self.exclude_paths = exclude_paths or set()

    def _record(self, request: Request, request_id: str, status_code: int, started: float) -> str:
        duration_ms = (time.perf_counter() - started) * 1000.0
        route = _route_template(request)
        if request.url.path not in self.exclude_paths:
            self.registry.observe(request.method, route, status_code, duration_ms)
        return json.dumps(
            {
                "event": "http_request",
                "request_id": request_id,
                "method": request.method,
                "route": route,
                "status_code": status_code,
                "duration_ms": round(duration_ms, 3),
                "client_ip": request.client.host if request.client else None,
                "subject": _token_subject(request),
            },
            ensure_ascii=False,
        )

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(self._record(request, request_id, 500, started))
            raise

        response.headers["X-Request-ID"] = request_id
        logger.info(self._record(request, request_id, response.status_code, started))
        return response
