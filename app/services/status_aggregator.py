import asyncio
from datetime import datetime, timezone
from typing import Iterable

from httpx import AsyncClient

from app.core.logging_config import setup_logging
from app.schemas.instance import Instance
from app.schemas.status import CheckResult, InstanceStatus, OverallStatus, StatusDocument
from app.services.instance_checker import DEFAULT_TIMEOUT_MS, DEFAULT_USER_AGENT, check_instance

logger = setup_logging()


def overall_status(results: Iterable[CheckResult]) -> OverallStatus:
    """Operational only when every instance is online."""
    if all(result.status is InstanceStatus.ONLINE for result in results):
        return OverallStatus.OPERATIONAL
    return OverallStatus.DEGRADED


def iso_timestamp(moment: datetime | None = None) -> str:
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


async def get_status(
    client: AsyncClient,
    instances: Iterable[Instance],
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    user_agent: str = DEFAULT_USER_AGENT,
) -> StatusDocument:
    """Probe every instance concurrently and combine the results."""
    probes = asyncio.gather(
        *(check_instance(client, instance, timeout_ms=timeout_ms, user_agent=user_agent) for instance in instances)
    )
    # Probes outlive a disconnected caller
    results = await asyncio.shield(probes)

    document = StatusDocument(
        timestamp=iso_timestamp(),
        overall=overall_status(results),
        instances=tuple(results),
    )
    logger.info(
        "Aggregation pass complete",
        overall=document.overall.value,
        statuses={result.id: result.status.value for result in results},
    )
    return document
