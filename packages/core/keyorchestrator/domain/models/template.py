"""Key template models."""

from __future__ import annotations

import re
from datetime import datetime
from enum import Enum
from typing import ClassVar

from pydantic import Field, field_validator

from keyorchestrator.domain.models.collection import PagedCollection
from keyorchestrator.domain.models.common import (
    ApiModel,
    KeyAlgorithm,
    KeystoresProperties,
    RequestModel,
    VaultReference,
)


class TemplateKeyState(str, Enum):
    """State a key is created in from a template."""

    PreActivation = "pre_activation"
    Active = "active"


class TemplateState(str, Enum):
    """Lifecycle of a template."""

    Unarchived = "unarchived"
    """Template can be used to create keys."""

    Archived = "archived"
    """Template is kept for reference but cannot create keys."""


# ISO 8601 period, e.g. P1Y or P6M
_PERIOD_PATTERN = re.compile(r"^P(?:\d+Y)?(?:\d+M)?(?:\d+W)?(?:\d+D)?$")


class KeyProperties(ApiModel):
    """Properties of keys created from a template, as returned by the service."""

    size: str | None = Field(default=None, description="Key size, e.g. 256 for AES")
    algorithm: str | None = Field(default=None, description="One of KeyAlgorithm")
    activation_date: str | None = Field(default=None, description="Period until activation, e.g. P1Y")
    expiration_date: str | None = Field(default=None, description="Period until expiration, e.g. P1Y")
    state: str | None = Field(default=None, description="One of TemplateKeyState")


class KeyPropertiesRequest(RequestModel):
    """Key properties sent when creating a template."""

    size: str = Field(..., description="Key size, e.g. 256 for AES", min_length=1)
    algorithm: KeyAlgorithm = Field(..., description="Key algorithm")
    activation_date: str = Field(..., description="Period until activation, e.g. P0D")
    expiration_date: str = Field(..., description="Period until expiration, e.g. P1Y")
    state: TemplateKeyState = Field(..., description="State of generated keys")

    @field_validator("activation_date", "expiration_date")
    @classmethod
    def validate_period(cls, v: str) -> str:
        """Validate ISO 8601 period format."""
        if v == "P" or not _PERIOD_PATTERN.match(v):
            raise ValueError(f"Invalid period {v!r}, expected e.g. P1Y or P30D")
        return v


class KeyPropertiesUpdate(RequestModel):
    """Key properties that can be changed on an existing template."""

    size: str | None = Field(default=None, min_length=1)
    activation_date: str | None = None
    expiration_date: str | None = None
    state: TemplateKeyState | None = None

    @field_validator("activation_date", "expiration_date")
    @classmethod
    def validate_period(cls, v: str | None) -> str | None:
        """Validate ISO 8601 period format."""
        if v is not None and (v == "P" or not _PERIOD_PATTERN.match(v)):
            raise ValueError(f"Invalid period {v!r}, expected e.g. P1Y or P30D")
        return v


class KeystoresPropertiesRequest(RequestModel):
    """Keystore group and type a template distributes keys to."""

    group: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)


class Template(ApiModel):
    """Reusable definition of key properties and target keystores."""

    vault: VaultReference | None = None
    id: str | None = Field(default=None, description="Template ID")
    version: int | None = Field(default=None, description="Template version", ge=0)
    name: str | None = Field(default=None, description="Template name")
    key: KeyProperties | None = None
    description: str | None = None
    state: str | None = Field(default=None, description="One of TemplateState")
    keystores: list[KeystoresProperties] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    created_by: str | None = None
    updated_by: str | None = None
    href: str | None = None

    def __repr__(self) -> str:
        return f"Template(id={self.id!r}, name={self.name!r}, version={self.version!r})"


class TemplateList(PagedCollection):
    """Page of key templates."""

    ITEMS_FIELD: ClassVar[str] = "templates"

    templates: list[Template] = Field(default_factory=list)
