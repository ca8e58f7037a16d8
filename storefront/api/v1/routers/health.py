# storefront/api/v1/routers/health.py
import time
import subprocess
from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])
START_TIME = time.time()


def _git_sha(short: bool = True) -> str:
    try:
        cmd = ["git", "rev-parse", "--short" if short else "HEAD"]
        return subprocess.check_output(cmd, stderr=subprocess.DEVNULL).decode().strip()
    except (OSError, subprocess.CalledProcessError):
        return "unknown"


@router.get("/health")
async def health(request: Request):
    """
    Tolerant health check:
    - storage backend in use and whether it is durable
    - KV ping when a KV client is connected, 'skipped' otherwise
    - basic app info and global status
    """
    state = request.app.state
    settings = state.settings
    storage = state.storage
    checks: dict[str, object] = {
        "app_name": settings.APP_NAME,
        "env": settings.APP_ENV,
        "debug": settings.DEBUG,
        "version": settings.GIT_SHA if settings.GIT_SHA != "unknown" else _git_sha(),
        "uptime_seconds": int(time.time() - START_TIME),
        "storage": storage.kind,
        "persistent": storage.durable,
    }

    # --- KV (tolerant) ---
    kv = getattr(state, "kv", None)
    if kv is None:
        checks["kv"] = "skipped"
    else:
        try:
            await kv.ping()
            checks["kv"] = "ok"
        except Exception as e:
            checks["kv"] = f"error: {e}"

    checks["kv_url_set"] = settings.kv_configured

    # only a failing KV that is actually in use makes the service unhealthy
    kv_in_use = storage.kind == "remote-kv"
    status = "error" if kv_in_use and checks["kv"] != "ok" else "ok"
    if not storage.durable:
        status = "degraded" if status == "ok" else status

    return {"status": status, "checks": checks, "timestamp": int(time.time())}
