"""
Shared pydantic building blocks.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class PartialUpdateModel(BaseModel):
    """
    Base for PUT bodies where every field is optional.

    At least one known field must be present, and a present field may not be
    null. Unknown fields are rejected.
    """

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _require_fields(self) -> "PartialUpdateModel":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided.")
        for name in sorted(self.model_fields_set):
            if getattr(self, name) is None:
                raise ValueError(f"{name} must not be null.")
        return self

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)
