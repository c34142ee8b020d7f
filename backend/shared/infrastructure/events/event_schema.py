"""
Envelope for order notifications published on Redis.

    {"v": 1, "type": "DELIVERY_ORDER_CREATED", "restaurant_id": "...",
     "ts": "2024-03-15T12:00:00+00:00", "actor": {"user_id": "..."},
     "entity": {...order snapshot...}}
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any

SCHEMA_VERSION = 1

# Subscribers read one message per order; anything larger is a bug upstream
MAX_EVENT_SIZE = 64 * 1024


@dataclass
class Event:
    type: str
    restaurant_id: str
    entity: dict[str, Any] = field(default_factory=dict)
    actor: dict[str, Any] = field(default_factory=dict)
    ts: str | None = None
    v: int = SCHEMA_VERSION

    def __post_init__(self) -> None:
        for name in ("type", "restaurant_id"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise ValueError(f"Event.{name} must be a non-empty string")
        for name in ("entity", "actor"):
            value = getattr(self, name)
            if value is None:
                setattr(self, name, {})
            elif not isinstance(value, dict):
                raise ValueError(f"Event.{name} must be a mapping")

    def to_json(self) -> str:
        """
        Serialize, stamping ``ts`` when unset.

        Raises:
            ValueError: Encoded payload is larger than MAX_EVENT_SIZE.
        """
        if self.ts is None:
            self.ts = datetime.now(timezone.utc).isoformat()
        payload = json.dumps(
            {f.name: getattr(self, f.name) for f in fields(self)},
            ensure_ascii=False,
            default=str,
        )
        size = len(payload.encode("utf-8"))
        if size > MAX_EVENT_SIZE:
            raise ValueError(f"{self.type} event is {size} bytes, limit is {MAX_EVENT_SIZE}")
        return payload

    @classmethod
    def from_json(cls, raw: str) -> Event:
        data = json.loads(raw)
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})
