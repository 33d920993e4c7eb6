import json
import os

from pydantic import TypeAdapter

from app.core.logging_config import setup_logging
from app.schemas.instance import Instance

logger = setup_logging()

_instance_list = TypeAdapter(list[Instance])


def load_registry(instances_file: str | None = None, default: list[Instance] | None = None) -> tuple[Instance, ...]:
    """Load the static instance registry.

    Args:
        instances_file: Optional path to a JSON file holding a list of
            ``{"id", "name", "url"}`` objects. Takes precedence over ``default``.
        default: Instances to use when no file is given.

    Returns:
        The registry as an immutable tuple, in declaration order.

    Raises:
        ValueError: If the file is missing or two instances share an id.
    """
    if instances_file:
        if not os.path.exists(instances_file):
            raise ValueError(f"Instances file not found: {instances_file}")
        with open(instances_file, "r") as f:
            instances = _instance_list.validate_python(json.load(f))
        source = instances_file
    else:
        instances = list(default or [])
        source = "settings"

    seen = set()
    for instance in instances:
        if instance.id in seen:
            raise ValueError(f"Duplicate instance id: {instance.id}")
        seen.add(instance.id)

    logger.info("Instance registry loaded", source=source, instances=[i.id for i in instances])
    return tuple(instances)
