# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""
Translation between CloudFormation resource models and Customer Profiles API shapes.

Covers tag list/map conversion, timestamp rendering, resource ARN construction
and building output models from API responses.
"""

import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from core.models import DomainModel, IntegrationModel, Tag


@dataclass
class StackLocation:
    """Partition, region and account of the stack that owns the resource."""
    partition: str
    region: str
    account_id: str


def parse_stack_location(stack_id: Optional[str]) -> StackLocation:
    """
    Extract partition, region and account from a CloudFormation stack ARN.

    Format: arn:{partition}:cloudformation:{region}:{account}:stack/{name}/{guid}
    Region falls back to AWS_REGION when the stack id cannot be parsed.
    """
    partition = "aws"
    region = os.environ.get("AWS_REGION", "us-east-1")
    account_id = ""

    if stack_id and stack_id.startswith("arn:"):
        arn_parts = stack_id.split(":")
        if len(arn_parts) >= 6:
            partition = arn_parts[1] or partition
            region = arn_parts[3] or region
            account_id = arn_parts[4]

    return StackLocation(partition=partition, region=region, account_id=account_id)


def domain_arn(location: StackLocation, domain_name: str) -> str:
    return (
        f"arn:{location.partition}:profile:{location.region}:{location.account_id}"
        f":domains/{domain_name}"
    )


def integration_arn(location: StackLocation, domain_name: str, uri: str) -> str:
    return f"{domain_arn(location, domain_name)}/integrations/{uri}"


def tags_to_map(tags: Optional[List[Tag]]) -> Dict[str, str]:
    """Convert a tag list to a key -> value map. Later duplicates win."""
    if not tags:
        return {}
    return {tag.key: tag.value for tag in tags}


def map_tags_to_list(tags: Optional[Dict[str, str]]) -> Optional[List[Tag]]:
    """
    Convert an API tag map to a tag list.

    Returns None for a missing or empty map. List order follows the map and
    carries no meaning.
    """
    if not tags:
        return None
    return [Tag(key=key, value=value) for key, value in tags.items()]


def format_timestamp(value: Any) -> Optional[str]:
    """
    Render an API timestamp as an ISO-8601 UTC string.

    Whole seconds render as 2021-03-04T05:06:07Z, anything finer as
    2021-03-04T05:06:07.123Z.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        value = value.astimezone(timezone.utc)
        timespec = "milliseconds" if value.microsecond else "seconds"
        return value.isoformat(timespec=timespec).replace("+00:00", "Z")
    return str(value)


def translate_domain_response(response: Dict[str, Any]) -> DomainModel:
    return DomainModel(
        domain_name=response.get("DomainName"),
        dead_letter_queue_url=response.get("DeadLetterQueueUrl"),
        default_encryption_key=response.get("DefaultEncryptionKey"),
        default_expiration_days=response.get("DefaultExpirationDays"),
        created_at=format_timestamp(response.get("CreatedAt")),
        last_updated_at=format_timestamp(response.get("LastUpdatedAt")),
        tags=map_tags_to_list(response.get("Tags")),
    )


def translate_integration_response(response: Dict[str, Any]) -> IntegrationModel:
    return IntegrationModel(
        domain_name=response.get("DomainName"),
        uri=response.get("Uri"),
        object_type_name=response.get("ObjectTypeName"),
        created_at=format_timestamp(response.get("CreatedAt")),
        last_updated_at=format_timestamp(response.get("LastUpdatedAt")),
        tags=map_tags_to_list(response.get("Tags")),
    )
