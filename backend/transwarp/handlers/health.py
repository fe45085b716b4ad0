"""Health Probe — liveness endpoint for container orchestration."""


async def health_check():
    """Basic liveness probe.

    Returns {"status": "healthy"} with 200 while the process is up.
    """
    return {"status": "healthy", "service": "transwarp", "version": "1.0.0"}


def routes():
    return {"GET /api/health": health_check}
