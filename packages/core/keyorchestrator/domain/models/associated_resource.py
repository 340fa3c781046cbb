"""Associated resource models."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar

from pydantic import Field

from keyorchestrator.domain.models.collection import PagedCollection
from keyorchestrator.domain.models.common import ApiModel, TargetKeystoreReference


class ManagedKeyReference(ApiModel):
    """Reference to the managed key protecting a resource."""

    id: str | None = None
    label: str | None = None
    href: str | None = None


class AssociatedResource(ApiModel):
    """External cloud resource, e.g. a storage bucket, protected by a managed key."""

    id: str | None = Field(default=None, description="Associated resource ID")
    name: str | None = Field(default=None, description="Resource name")
    type: str | None = Field(default=None, description="Resource type, e.g. cloud_object_storage_bucket")
    crn: str | None = Field(default=None, description="Cloud resource name")
    managed_key: ManagedKeyReference | None = None
    referenced_keystores: list[TargetKeystoreReference] = Field(default_factory=list)
    deletion_protected: bool | None = Field(
        default=None,
        description="Whether the resource blocks deletion of its managed key",
    )
    created_at: datetime | None = None
    updated_at: datetime | None = None
    href: str | None = None


class AssociatedResourceList(PagedCollection):
    """Page of associated resources."""

    ITEMS_FIELD: ClassVar[str] = "associated_resources"

    associated_resources: list[AssociatedResource] = Field(default_factory=list)
