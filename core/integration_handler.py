# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""
Lifecycle operations for the Customer Profiles integration custom resource.

Integrations are keyed by domain name and URI. PutIntegration serves both
create and update.
"""

import logging
from typing import Dict, Optional

from core.models import IntegrationModel
from core.tagging import normalize_desired_tags, remove_previous_tags
from core.translator import (
    StackLocation,
    integration_arn,
    tags_to_map,
    translate_integration_response,
)
from helpers.customer_profiles_client import CustomerProfilesClient
from helpers.errors import CfnInvalidRequestError, CfnNotFoundError

logger = logging.getLogger(__name__)


def validate_integration(model: IntegrationModel) -> None:
    missing_params = []
    if not model.domain_name:
        missing_params.append("DomainName")
    if not model.uri:
        missing_params.append("Uri")

    if missing_params:
        raise CfnInvalidRequestError(f"Missing required properties: {', '.join(missing_params)}")


def handle_create(model: IntegrationModel, client: CustomerProfilesClient) -> IntegrationModel:
    validate_integration(model)
    logger.info("Creating integration: domain_name=%s, uri=%s", model.domain_name, model.uri)

    response = client.put_integration(
        domain_name=model.domain_name,
        uri=model.uri,
        object_type_name=model.object_type_name,
        tags=normalize_desired_tags(tags_to_map(model.tags))
    )

    return translate_integration_response(response)


def handle_update(
    model: IntegrationModel,
    previous_tags: Optional[Dict[str, str]],
    desired_tags: Optional[Dict[str, str]],
    location: StackLocation,
    client: CustomerProfilesClient
) -> IntegrationModel:
    """
    Update an existing integration and reconcile its tags.

    GetIntegration must succeed before anything is mutated. Previous tag keys
    are removed, then PutIntegration is called with the desired object type
    and tags.

    Raises:
        CfnError: Classified failure of any of the API calls
    """
    validate_integration(model)

    # An integration that was never created cannot be updated
    client.get_integration(domain_name=model.domain_name, uri=model.uri)
    logger.info("Found integration: domain_name=%s, uri=%s", model.domain_name, model.uri)

    remove_previous_tags(
        client,
        integration_arn(location, model.domain_name, model.uri),
        previous_tags
    )

    response = client.put_integration(
        domain_name=model.domain_name,
        uri=model.uri,
        object_type_name=model.object_type_name,
        tags=normalize_desired_tags(desired_tags)
    )

    logger.info("Updated integration: domain_name=%s, uri=%s", model.domain_name, model.uri)
    return translate_integration_response(response)


def handle_delete(model: IntegrationModel, client: CustomerProfilesClient) -> None:
    validate_integration(model)
    logger.info("Deleting integration: domain_name=%s, uri=%s", model.domain_name, model.uri)

    try:
        client.delete_integration(domain_name=model.domain_name, uri=model.uri)
    except CfnNotFoundError:
        logger.info(
            "Integration %s in domain %s not found, considering as successfully deleted",
            model.uri,
            model.domain_name
        )
