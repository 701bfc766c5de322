from collections.abc import Callable

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from taskhub.db import db_ping
from taskhub.redis_client import redis_ping

router = APIRouter(tags=["health"])

def _probes() -> dict[str, Callable[[], bool]]:
    # looked up per call so tests can swap them out
    return {"db": db_ping, "redis": redis_ping}

def _describe(e: Exception) -> str:
    msg = str(e).strip()
    return f"{e.__class__.__name__}: {msg}" if msg else e.__class__.__name__

# liveness: the process is up, nothing else is checked
@router.get("/health")
def health() -> dict:
    return {"status": "ok"}

@router.get("/ready")
def ready() -> JSONResponse:
    checks: dict[str, bool] = {}
    errors: dict[str, str] = {}

    for name, probe in _probes().items():
        try:
            checks[name] = bool(probe())
        except Exception as e:
            checks[name] = False
            errors[name] = _describe(e)

    ok = all(checks.values())
    body: dict = {"status": "ok" if ok else "unready", "checks": checks}
    if errors:
        body["errors"] = errors

    # 503 as soon as the database or redis is unreachable
    return JSONResponse(status_code=200 if ok else 503, content=body)
