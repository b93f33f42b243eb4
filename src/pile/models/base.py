"""Base models for Pile."""

from pydantic import BaseModel, ConfigDict


class PileBaseModel(BaseModel):
    """Base model for catalog entities and configuration records."""

    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=True,
        extra="forbid",  # Strict validation for catalog records
    )
