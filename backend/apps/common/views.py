import os
import time

from django.db import connections
from django.db.utils import OperationalError
from django.http import JsonResponse

from .logger import get_logger

try:
    import redis as redis_lib  # optional; readiness skips the redis check without it
except ImportError:  # pragma: no cover
    redis_lib = None

logger = get_logger(__name__).bind(component="common", layer="health")


def _redis_ping(url: str, timeout: float = 0.3):
    if not redis_lib:
        logger.debug("Redis health check skipped; library missing")
        return {"status": "skipped", "detail": "redis lib not installed"}
    try:
        client = redis_lib.from_url(
            url, socket_connect_timeout=timeout, socket_timeout=timeout
        )
        if client.ping():
            logger.debug("Redis health check succeeded")
            return {"status": "ok"}
        logger.warning("Redis health check returned unexpected response")
        return {"status": "fail"}
    except Exception as exc:  # pragma: no cover - network dependent
        logger.warning("Redis health check failed", error=str(exc))
        return {"status": "fail", "error": str(exc)}


def _db_check(alias: str = "default"):
    started = time.monotonic()
    try:
        with connections[alias].cursor() as cursor:
            cursor.execute("SELECT 1")
    except OperationalError as exc:
        logger.warning(
            "Database health check encountered operational error",
            alias=alias,
            error=str(exc),
        )
        return {"status": "fail", "error": str(exc)}
    except Exception as exc:
        logger.error(
            "Database health check failed unexpectedly",
            alias=alias,
            error=str(exc),
            exception=exc.__class__.__name__,
        )
        return {"status": "fail", "error": str(exc), "exception": exc.__class__.__name__}
    latency = round((time.monotonic() - started) * 1000, 2)
    logger.debug("Database health check succeeded", alias=alias, latency_ms=latency)
    return {"status": "ok", "latency_ms": latency}


def live_health(request):
    """Liveness probe: the process is up and serving requests."""
    logger.debug("Liveness probe served")
    return JsonResponse({"status": "alive"})


def ready_health(request):
    """Readiness probe: the database answers and, when configured, Redis too."""
    checks = {"database": _db_check()}
    redis_url = os.getenv("REDIS_URL")
    if redis_url:
        checks["redis"] = _redis_ping(redis_url)
    else:
        checks["redis"] = {"status": "skipped", "detail": "REDIS_URL not set"}

    failing = [name for name, result in checks.items() if result.get("status") == "fail"]
    overall_status = "degraded" if failing else "ok"
    logger.info(
        "Readiness probe evaluated", status=overall_status, failing_components=failing
    )
    return JsonResponse(
        {"status": overall_status, "checks": checks},
        status=503 if failing else 200,
    )
