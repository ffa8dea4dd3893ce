from typing import Any, ClassVar

from pydantic import BaseModel


class PatchModel(BaseModel):
    """
    Partial update payload. Only fields the client sent are applied; an
    explicit null is dropped unless the field is listed in NULLABLE.
    """

    NULLABLE: ClassVar[frozenset[str]] = frozenset()

    def changes(self) -> dict[str, Any]:
        return {
            name: value
            for name, value in self.model_dump(exclude_unset=True).items()
            if value is not None or name in self.NULLABLE
        }
