"""
Common Schemas
Shared base for partial update payloads
"""

from pydantic import BaseModel, model_validator
from typing import ClassVar, Tuple


class PartialUpdate(BaseModel):
    """
    Partial update payload

    Omitted fields are left unchanged. An explicit null is only accepted
    for the fields listed in ``nullable``; every other column is NOT NULL
    and cannot be cleared.
    """
    nullable: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode='after')
    def reject_null_fields(self):
        nulls = sorted(
            name for name in self.model_fields_set
            if name not in self.nullable and getattr(self, name) is None
        )
        if nulls:
            raise ValueError(f"{', '.join(nulls)} cannot be null")
        return self
