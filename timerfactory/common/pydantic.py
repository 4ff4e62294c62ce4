"""Pydantic base models."""

from pydantic import BaseModel, ConfigDict, Field


class FrozenBaseModel(BaseModel):
    """Pydantic frozen base model."""

    model_config = ConfigDict(frozen=True, strict=True)


class FactoryConfig(FrozenBaseModel):
    """Timer factory settings."""

    thread_name_prefix: str = Field(default="timerfactory", min_length=1)
    daemon: bool = True
