# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""
Customer Profiles Custom Resource Lambda Handler

This Lambda function handles CloudFormation custom resource events to manage
Amazon Connect Customer Profiles domains and integrations.

Supported resource types:
- Custom::CustomerProfilesDomain
- Custom::CustomerProfilesIntegration

The handler supports Create, Update, and Delete operations. Every failure is
reported to CloudFormation with one of four handler error codes:
InvalidRequest, NotFound, ServiceInternalError or GeneralServiceException.
"""

import json
import logging
import os
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from core import domain_handler, integration_handler
from core.models import DomainModel, IntegrationModel, parse_tags
from core.translator import (
    StackLocation,
    domain_arn,
    integration_arn,
    parse_stack_location,
    tags_to_map,
)
from helpers.customer_profiles_client import CustomerProfilesClient, get_customer_profiles_client
from helpers.errors import CfnError, CfnInvalidRequestError, to_cfn_error

# Configure logging
logger = logging.getLogger()
logger.setLevel(os.environ.get("LOGGING_LEVEL", "INFO"))

# CloudFormation response status constants
SUCCESS = "SUCCESS"
FAILED = "FAILED"

DOMAIN_RESOURCE_TYPE = "Custom::CustomerProfilesDomain"
INTEGRATION_RESOURCE_TYPE = "Custom::CustomerProfilesIntegration"

# CloudFormation rejects custom resource responses larger than this
MAX_RESPONSE_BYTES = 4096


@dataclass
class ResourceHandlers:
    """Model class, lifecycle operations and ARN builder for one resource type."""
    model_class: Any
    create: Callable
    update: Callable
    delete: Callable
    arn: Callable[[StackLocation, Any], str]


RESOURCE_HANDLERS: Dict[str, ResourceHandlers] = {
    DOMAIN_RESOURCE_TYPE: ResourceHandlers(
        model_class=DomainModel,
        create=domain_handler.handle_create,
        update=domain_handler.handle_update,
        delete=domain_handler.handle_delete,
        arn=lambda location, model: domain_arn(location, model.domain_name),
    ),
    INTEGRATION_RESOURCE_TYPE: ResourceHandlers(
        model_class=IntegrationModel,
        create=integration_handler.handle_create,
        update=integration_handler.handle_update,
        delete=integration_handler.handle_delete,
        arn=lambda location, model: integration_arn(location, model.domain_name, model.uri),
    ),
}


def send_cfn_response(
    event: Dict[str, Any],
    context: Any,
    status: str,
    data: Optional[Dict[str, Any]] = None,
    physical_resource_id: Optional[str] = None,
    reason: Optional[str] = None
) -> None:
    """
    Send response to CloudFormation via the pre-signed S3 URL.

    Delivery failures are logged and never raised.

    Args:
        event: CloudFormation custom resource event containing ResponseURL
        context: Lambda execution context
        status: Response status (SUCCESS or FAILED)
        data: Optional response data dictionary
        physical_resource_id: Physical resource identifier for CloudFormation
        reason: Optional reason string for failures
    """
    response_url = event.get("ResponseURL")
    if not response_url:
        logger.error("No ResponseURL found in event - cannot send response to CloudFormation")
        return

    response_body = {
        "Status": status,
        "Reason": reason or f"See CloudWatch Log Stream: {context.log_stream_name}",
        "PhysicalResourceId": physical_resource_id or context.log_stream_name,
        "StackId": event.get("StackId"),
        "RequestId": event.get("RequestId"),
        "LogicalResourceId": event.get("LogicalResourceId"),
        "Data": data or {}
    }

    json_body = fit_response_body(response_body)

    logger.info(
        "Sending CloudFormation response: status=%s, physical_resource_id=%s",
        status,
        response_body["PhysicalResourceId"]
    )
    logger.debug("Response body: %s", json.dumps(response_body, indent=2))

    try:
        request = urllib.request.Request(
            response_url,
            data=json_body,
            headers={
                "Content-Type": "",
                "Content-Length": str(len(json_body))
            },
            method="PUT"
        )

        with urllib.request.urlopen(request, timeout=30) as response:
            logger.info(
                "CloudFormation response sent successfully: status_code=%d",
                response.status
            )

    except urllib.error.URLError as e:
        logger.error("Failed to send CloudFormation response: %s", str(e))
    except Exception as e:
        logger.exception("Unexpected error sending CloudFormation response: %s", str(e))


def fit_response_body(response_body: Dict[str, Any]) -> bytes:
    """
    Encode the response document, shrinking it to MAX_RESPONSE_BYTES.

    Data is dropped first. Reason is truncated only if the document is still
    too large.
    """
    json_body = json.dumps(response_body).encode("utf-8")
    if len(json_body) <= MAX_RESPONSE_BYTES:
        return json_body

    logger.warning(
        "Response body is %d bytes, over the %d byte limit - dropping Data keys: %s",
        len(json_body),
        MAX_RESPONSE_BYTES,
        sorted(response_body.get("Data") or {})
    )
    response_body["Data"] = {}
    json_body = json.dumps(response_body).encode("utf-8")

    overflow = len(json_body) - MAX_RESPONSE_BYTES
    if overflow > 0:
        reason = response_body["Reason"]
        response_body["Reason"] = reason[:max(len(reason) - overflow - 3, 0)] + "..."
        json_body = json.dumps(response_body).encode("utf-8")

    return json_body


def get_resource_handlers(resource_type: Optional[str]) -> ResourceHandlers:
    resource = RESOURCE_HANDLERS.get(resource_type)
    if resource is None:
        raise CfnInvalidRequestError(
            f"Unsupported ResourceType: {resource_type}. "
            f"Expected one of: {', '.join(sorted(RESOURCE_HANDLERS))}"
        )
    return resource


def get_tags(properties: Optional[Dict[str, Any]]) -> Optional[Dict[str, str]]:
    """
    Return the Tags property of a properties block as a key -> value map.

    None when the properties carry no Tags at all.
    """
    if not properties or properties.get("Tags") is None:
        return None
    return tags_to_map(parse_tags(properties["Tags"]))


def handle_create(
    event: Dict[str, Any],
    resource: ResourceHandlers,
    client: CustomerProfilesClient
) -> Tuple[Dict[str, Any], str]:
    """
    Handle Create operation.

    Returns:
        Tuple of (response Data, physical resource id)
    """
    location = parse_stack_location(event.get("StackId"))
    model = resource.model_class.from_properties(event.get("ResourceProperties"))

    created = resource.create(model, client)
    return created.to_dict(), resource.arn(location, model)


def handle_update(
    event: Dict[str, Any],
    resource: ResourceHandlers,
    client: CustomerProfilesClient
) -> Tuple[Dict[str, Any], str]:
    """
    Handle Update operation.

    A change to a create-only identifier (domain name, integration URI) creates
    a new resource under a new physical id. CloudFormation then sends a Delete
    for the old one.

    Returns:
        Tuple of (response Data, physical resource id)
    """
    properties = event.get("ResourceProperties") or {}
    old_properties = event.get("OldResourceProperties") or {}
    location = parse_stack_location(event.get("StackId"))

    model = resource.model_class.from_properties(properties)
    old_model = resource.model_class.from_properties(old_properties)

    if old_properties and old_model.identifier != model.identifier:
        logger.info(
            "Identifier changed from %s to %s, replacing resource",
            old_model.identifier,
            model.identifier
        )
        return handle_create(event, resource, client)

    updated = resource.update(
        model,
        get_tags(old_properties),
        get_tags(properties),
        location,
        client
    )
    return updated.to_dict(), resource.arn(location, model)


def handle_delete(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Handle Delete operation.

    A physical id that is not an ARN means Create never succeeded, so there is
    nothing to delete. That check runs before the ResourceType is resolved, so
    a stack holding a failed resource with a mistyped ResourceType can still
    be deleted.
    """
    physical_resource_id = event.get("PhysicalResourceId") or ""
    if not physical_resource_id.startswith("arn:"):
        logger.warning(
            "Resource was never created - treating delete as no-op: physical_resource_id=%s",
            physical_resource_id
        )
        return {}

    resource = get_resource_handlers(event.get("ResourceType"))
    model = resource.model_class.from_properties(event.get("ResourceProperties"))
    resource.delete(model, get_customer_profiles_client())
    return {}


def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda handler for CloudFormation custom resource.

    Args:
        event: CloudFormation custom resource event
        context: Lambda execution context

    Returns:
        Dict containing the operation result (for direct Lambda invocation testing)
    """
    logger.info("Received CloudFormation custom resource event")
    logger.info("Event: %s", json.dumps(event, default=str, indent=2))

    request_type = event.get("RequestType", "Unknown")
    resource_type = event.get("ResourceType")
    physical_resource_id = event.get("PhysicalResourceId")

    logger.info(
        "Processing request: type=%s, resource_type=%s, physical_resource_id=%s",
        request_type,
        resource_type,
        physical_resource_id
    )

    response_data: Dict[str, Any] = {}
    status = SUCCESS
    reason = None

    try:
        if request_type == "Create":
            response_data, physical_resource_id = handle_create(
                event, get_resource_handlers(resource_type), get_customer_profiles_client()
            )

        elif request_type == "Update":
            response_data, physical_resource_id = handle_update(
                event, get_resource_handlers(resource_type), get_customer_profiles_client()
            )

        elif request_type == "Delete":
            response_data = handle_delete(event)

        else:
            raise CfnInvalidRequestError(f"Unknown RequestType: {request_type}")

        logger.info(
            "Operation completed successfully: request_type=%s, physical_resource_id=%s",
            request_type,
            physical_resource_id
        )

    except CfnError as e:
        logger.error(
            "%s operation failed: error_code=%s, message=%s",
            request_type,
            e.error_code,
            e.message
        )
        status = FAILED
        reason = f"{e.error_code}: {e.message}"
        response_data = e.to_dict()

    except Exception as e:
        logger.exception("Unexpected error during %s operation: %s", request_type, str(e))
        error = to_cfn_error(e)
        status = FAILED
        reason = f"{error.error_code}: {error.message}"
        response_data = error.to_dict()

    send_cfn_response(
        event=event,
        context=context,
        status=status,
        data=response_data,
        physical_resource_id=physical_resource_id,
        reason=reason
    )

    return {
        "Status": status,
        "PhysicalResourceId": physical_resource_id or context.log_stream_name,
        "Data": response_data,
        "Reason": reason
    }
