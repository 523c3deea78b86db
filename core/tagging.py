# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""
Tag reconciliation shared by the domain and integration handlers.

Updates remove every previous tag key first and then send the desired tags
with the mutating call. A null and an empty desired tag map are treated the
same way: no Tags parameter is sent.
"""

import logging
from typing import Dict, List, Optional

from helpers.customer_profiles_client import CustomerProfilesClient

logger = logging.getLogger(__name__)


def tag_keys_to_remove(previous_tags: Optional[Dict[str, str]]) -> List[str]:
    if not previous_tags:
        return []
    return list(previous_tags.keys())


def remove_previous_tags(
    client: CustomerProfilesClient,
    resource_arn: str,
    previous_tags: Optional[Dict[str, str]]
) -> List[str]:
    """
    Untag every key of the previous tag map from the resource.

    No call is made when there are no previous tags. Faults are raised as
    classified CfnError by the client.

    Returns:
        List[str]: The keys that were removed
    """
    keys = tag_keys_to_remove(previous_tags)
    if not keys:
        logger.info("No previous tags to remove from %s", resource_arn)
        return keys

    logger.info("Removing previous tags from %s: keys=%s", resource_arn, keys)
    client.untag_resource(resource_arn=resource_arn, tag_keys=keys)
    return keys


def normalize_desired_tags(desired_tags: Optional[Dict[str, str]]) -> Optional[Dict[str, str]]:
    # Previous keys were already untagged, so None here still ends with no tags
    if not desired_tags:
        return None
    return dict(desired_tags)
