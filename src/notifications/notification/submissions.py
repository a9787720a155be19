"""Customer submissions that operators are notified about.

Messages, contact requests and reviews are stored elsewhere; only the fields
needed to render the operator notification are modelled here.
"""

from pydantic import BaseModel, ConfigDict, Field


class CustomerMessage(BaseModel):
    """A message or contact-form submission."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    email: str | None = None
    phone: str | None = None
    subject: str | None = None
    message: str = Field(min_length=1)


class ReviewSubmission(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_name: str
    user_name: str = Field(min_length=1)
    rating: int = Field(ge=1, le=5)
    comment: str = ""
