from typing import Any


# Type aliases for Python dictionaries
type HandlerEvent = dict[str, Any]
type HandlerResponse = dict[str, Any]
type SnapshotPayload = dict[str, dict[str, Any]]
type RedisConfiguration = dict[str, Any]
