# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""
Customer Profiles Resource Models
Dataclasses for the domain and integration custom resource properties
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from helpers.errors import CfnInvalidRequestError


@dataclass
class Tag:
    """A single resource tag in CloudFormation shape."""
    key: str
    value: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Tag":
        return cls(key=data.get("Key", ""), value=data.get("Value", ""))

    def to_dict(self) -> Dict[str, str]:
        return {"Key": self.key, "Value": self.value}


def parse_tags(value: Any) -> Optional[List[Tag]]:
    """
    Parse the Tags property of a CloudFormation resource.

    Args:
        value: List of {"Key": ..., "Value": ...} dicts, or None

    Returns:
        List[Tag] or None when no tags were given
    """
    if not value:
        return None
    if not isinstance(value, list):
        raise CfnInvalidRequestError(f"Tags must be a list of Key/Value objects, got {type(value).__name__}")

    tags = []
    for index, item in enumerate(value):
        if not isinstance(item, dict):
            raise CfnInvalidRequestError(
                f"Tags[{index}] must be a Key/Value object, got {type(item).__name__}"
            )
        if not item.get("Key"):
            raise CfnInvalidRequestError(f"Tags[{index}] is missing a Key")
        tags.append(Tag.from_dict(item))
    return tags


def parse_int_property(name: str, value: Any) -> Optional[int]:
    """
    Coerce a numeric property to int.

    CloudFormation delivers every scalar property to custom resources as a string.
    """
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise CfnInvalidRequestError(f"{name} must be an integer, got {value!r}")


def _drop_none(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


@dataclass
class DomainModel:
    """
    Customer Profiles domain resource.

    created_at and last_updated_at are read-only and only set on models
    translated from an API response.
    """
    domain_name: Optional[str] = None
    dead_letter_queue_url: Optional[str] = None
    default_encryption_key: Optional[str] = None
    default_expiration_days: Optional[int] = None
    created_at: Optional[str] = None
    last_updated_at: Optional[str] = None
    tags: Optional[List[Tag]] = None

    @classmethod
    def from_properties(cls, properties: Optional[Dict[str, Any]]) -> "DomainModel":
        properties = properties or {}
        return cls(
            domain_name=properties.get("DomainName"),
            dead_letter_queue_url=properties.get("DeadLetterQueueUrl"),
            default_encryption_key=properties.get("DefaultEncryptionKey"),
            default_expiration_days=parse_int_property(
                "DefaultExpirationDays", properties.get("DefaultExpirationDays")
            ),
            tags=parse_tags(properties.get("Tags")),
        )

    @property
    def identifier(self) -> tuple:
        return (self.domain_name,)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to CloudFormation response Data, dropping unset fields."""
        return _drop_none({
            "DomainName": self.domain_name,
            "DeadLetterQueueUrl": self.dead_letter_queue_url,
            "DefaultEncryptionKey": self.default_encryption_key,
            "DefaultExpirationDays": self.default_expiration_days,
            "CreatedAt": self.created_at,
            "LastUpdatedAt": self.last_updated_at,
            "Tags": [tag.to_dict() for tag in self.tags] if self.tags is not None else None,
        })


@dataclass
class IntegrationModel:
    """Customer Profiles integration resource."""
    domain_name: Optional[str] = None
    uri: Optional[str] = None
    object_type_name: Optional[str] = None
    created_at: Optional[str] = None
    last_updated_at: Optional[str] = None
    tags: Optional[List[Tag]] = None

    @classmethod
    def from_properties(cls, properties: Optional[Dict[str, Any]]) -> "IntegrationModel":
        properties = properties or {}
        return cls(
            domain_name=properties.get("DomainName"),
            uri=properties.get("Uri"),
            object_type_name=properties.get("ObjectTypeName"),
            tags=parse_tags(properties.get("Tags")),
        )

    @property
    def identifier(self) -> tuple:
        return (self.domain_name, self.uri)

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "DomainName": self.domain_name,
            "Uri": self.uri,
            "ObjectTypeName": self.object_type_name,
            "CreatedAt": self.created_at,
            "LastUpdatedAt": self.last_updated_at,
            "Tags": [tag.to_dict() for tag in self.tags] if self.tags is not None else None,
        })
