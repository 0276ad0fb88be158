"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation at the API boundary with self-documenting `Field`s,
  without coupling the Core to I/O libraries.

Note:
- These models describe *what* the data is, not *how* it is obtained.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class BreedImageResponse(BaseModel):
    """Body of `GET /breed/{breed}/images/random`.

    Only `message` is consumed; dog.ceo also reports errors with the same
    shape (`status="error"` and a human readable `message`).
    """

    model_config = ConfigDict(extra="ignore")

    message: str = Field(
        ...,
        description="Image URL on success, error description otherwise.",
    )
    status: str = Field(
        default="success",
        description="API status marker ('success' or 'error').",
    )

    @property
    def ok(self) -> bool:
        return self.status == "success"
