# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""
Lifecycle operations for the Customer Profiles domain custom resource.

- Create: CreateDomain with the desired fields and tags
- Update: GetDomain (existence check), UntagResource for the previous tag keys,
  then UpdateDomain with the desired fields and tags
- Delete: DeleteDomain, a missing domain counts as deleted
"""

import logging
from typing import Dict, Optional

from core.models import DomainModel
from core.tagging import normalize_desired_tags, remove_previous_tags
from core.translator import StackLocation, domain_arn, tags_to_map, translate_domain_response
from helpers.customer_profiles_client import CustomerProfilesClient
from helpers.errors import CfnInvalidRequestError, CfnNotFoundError

logger = logging.getLogger(__name__)


def validate_domain(model: DomainModel) -> None:
    if not model.domain_name:
        raise CfnInvalidRequestError("Missing required property: DomainName")


def handle_create(model: DomainModel, client: CustomerProfilesClient) -> DomainModel:
    """
    Create a new domain.

    Args:
        model: Desired domain state
        client: Customer Profiles client

    Returns:
        DomainModel: Domain as returned by CreateDomain
    """
    validate_domain(model)
    logger.info("Creating domain: domain_name=%s", model.domain_name)

    response = client.create_domain(
        domain_name=model.domain_name,
        default_expiration_days=model.default_expiration_days,
        default_encryption_key=model.default_encryption_key,
        dead_letter_queue_url=model.dead_letter_queue_url,
        tags=normalize_desired_tags(tags_to_map(model.tags))
    )

    logger.info("Created domain: domain_name=%s", model.domain_name)
    return translate_domain_response(response)


def handle_update(
    model: DomainModel,
    previous_tags: Optional[Dict[str, str]],
    desired_tags: Optional[Dict[str, str]],
    location: StackLocation,
    client: CustomerProfilesClient
) -> DomainModel:
    """
    Update an existing domain and reconcile its tags.

    Any fault aborts the update. Tags already removed are not restored when
    UpdateDomain fails.

    Args:
        model: Desired domain state
        previous_tags: Tags before the change (None is treated as no tags)
        desired_tags: Tags after the change (None or empty sends no tags)
        location: Stack partition/region/account for the domain ARN
        client: Customer Profiles client

    Returns:
        DomainModel: Domain as returned by UpdateDomain

    Raises:
        CfnError: Classified failure of any of the API calls
    """
    validate_domain(model)

    # A domain that was never created cannot be updated
    client.get_domain(domain_name=model.domain_name)
    logger.info("Found domain: domain_name=%s", model.domain_name)

    remove_previous_tags(client, domain_arn(location, model.domain_name), previous_tags)

    response = client.update_domain(
        domain_name=model.domain_name,
        default_expiration_days=model.default_expiration_days,
        default_encryption_key=model.default_encryption_key,
        dead_letter_queue_url=model.dead_letter_queue_url,
        tags=normalize_desired_tags(desired_tags)
    )

    logger.info("Updated domain: domain_name=%s", model.domain_name)
    return translate_domain_response(response)


def handle_delete(model: DomainModel, client: CustomerProfilesClient) -> None:
    validate_domain(model)
    logger.info("Deleting domain: domain_name=%s", model.domain_name)

    try:
        client.delete_domain(domain_name=model.domain_name)
    except CfnNotFoundError:
        logger.info("Domain %s not found, considering as successfully deleted", model.domain_name)
        return

    logger.info("Deleted domain: domain_name=%s", model.domain_name)
