"""Credentials handed to destination builders.

Secrets are fetched from the cluster by the caller. The generator only
reads their keys; it never performs I/O to obtain them.
"""

from typing import Optional

from pydantic import Field

from logforward.schemas.base import ForwarderBaseModel


class Secret(ForwarderBaseModel):
    """A named bag of credential values, keyed like a Kubernetes Secret."""
    name: str = Field(min_length=1)
    data: dict[str, str] = Field(default_factory=dict)

    def has(self, key: str) -> bool:
        return bool(self.data.get(key))

    def get(self, key: str) -> Optional[str]:
        value = self.data.get(key)
        return value if value else None
