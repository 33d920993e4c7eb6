import asyncio
import time

from httpx import AsyncClient, RequestError, TimeoutException

from app.core.logging_config import setup_logging
from app.schemas.instance import Instance
from app.schemas.status import CheckResult, InstanceStatus
from app.services.probe_metrics import record_probe

logger = setup_logging()

DEFAULT_TIMEOUT_MS = 5000
DEFAULT_USER_AGENT = "DIVE25-Status-Checker/1.0"


def _offline(instance: Instance, message: str) -> CheckResult:
    return CheckResult(
        id=instance.id,
        name=instance.name,
        status=InstanceStatus.OFFLINE,
        latency_ms=None,
        error_message=message,
    )


async def check_instance(
    client: AsyncClient,
    instance: Instance,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    user_agent: str = DEFAULT_USER_AGENT,
) -> CheckResult:
    """Probe one instance once and classify the outcome.

    Never raises: timeouts and transport failures become ``offline`` results,
    non-2xx responses become ``degraded``.
    """
    start = time.perf_counter()
    timeout = timeout_ms / 1000
    try:
        # The client timeout bounds each phase, wait_for bounds the whole probe
        response = await asyncio.wait_for(
            client.get(instance.url, headers={"User-Agent": user_agent}, timeout=timeout),
            timeout=timeout,
        )
    except (asyncio.TimeoutError, TimeoutException) as e:
        logger.warning("Instance probe timed out", instance=instance.id, url=instance.url, exception_type=type(e).__name__)
        result = _offline(instance, f"Timed out after {timeout_ms}ms")
    except RequestError as e:
        logger.warning("Instance probe failed", instance=instance.id, url=instance.url, exception=str(e), exception_type=type(e).__name__)
        result = _offline(instance, str(e) or type(e).__name__)
    except Exception as e:
        logger.error("Unexpected probe error", instance=instance.id, url=instance.url, exception=str(e), exception_type=type(e).__name__)
        result = _offline(instance, str(e) or type(e).__name__)
    else:
        latency = int((time.perf_counter() - start) * 1000)
        status = InstanceStatus.ONLINE if response.is_success else InstanceStatus.DEGRADED
        if status is InstanceStatus.DEGRADED:
            logger.warning("Instance unhealthy", instance=instance.id, status_code=response.status_code, latency_ms=latency)
        else:
            logger.debug("Instance healthy", instance=instance.id, status_code=response.status_code, latency_ms=latency)
        result = CheckResult(
            id=instance.id,
            name=instance.name,
            status=status,
            latency_ms=latency,
            status_code=response.status_code,
        )

    record_probe(result)
    return result
