from collections.abc import Awaitable, Callable, Mapping
from typing import Any

AsyncMessageHandler = Callable[[bytes, Mapping[str, Any]], Awaitable[Any]]
SyncMessageHandler = Callable[[bytes, Mapping[str, Any]], Any]
MessageHandler = AsyncMessageHandler | SyncMessageHandler
