from typing import Any

from pydantic import BaseModel, ConfigDict


class BaseModelWithMethods(BaseModel):
    """Base model for Bangumi payloads; unknown fields are kept, not rejected."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def to_json(self, **kwargs: Any) -> str:
        return self.model_dump_json(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()
