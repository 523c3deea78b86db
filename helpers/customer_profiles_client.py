# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""
Customer Profiles Client Helper

Thin wrapper around the boto3 'customer-profiles' client used by the domain
and integration custom resource handlers.

Every API call goes through a single invocation path that logs the call and
converts any fault into a classified CfnError (see helpers.errors). Parameters
whose value is None are dropped before the call, since botocore rejects None
for optional members.
"""

import logging
import os
from typing import Any, Dict, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from helpers.errors import get_error_code, to_cfn_error

logger = logging.getLogger(__name__)

SERVICE_NAME = "customer-profiles"

# Global client for Lambda warm start optimization
_customer_profiles_client: Optional["CustomerProfilesClient"] = None


def get_customer_profiles_client() -> "CustomerProfilesClient":
    """
    Get or create the process-wide Customer Profiles client.

    The client is created on first use and reused across Lambda invocations.

    Returns:
        CustomerProfilesClient: Reusable client wrapper
    """
    global _customer_profiles_client
    if _customer_profiles_client is None:
        _customer_profiles_client = CustomerProfilesClient()
        logger.info(
            "Created new Customer Profiles client: region=%s",
            _customer_profiles_client.region
        )
    return _customer_profiles_client


def reset_customer_profiles_client() -> None:
    """Drop the cached client so the next call creates a fresh one."""
    global _customer_profiles_client
    _customer_profiles_client = None


def compact(params: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in params.items() if value is not None}


class CustomerProfilesClient:
    """
    Customer Profiles API client for domain and integration operations.

    Attributes:
        region: AWS region the client talks to
        client: Underlying boto3 client
    """

    def __init__(
        self,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        client: Any = None
    ) -> None:
        """
        Initialize the client.

        Args:
            region: AWS region. Defaults to the AWS_REGION environment variable.
            endpoint_url: Optional endpoint override. Defaults to the
                          CUSTOMER_PROFILES_ENDPOINT_URL environment variable.
            client: Pre-built boto3 client (used by tests)
        """
        self.region = region or os.environ.get("AWS_REGION", "us-east-1")
        if client is None:
            endpoint_url = endpoint_url or os.environ.get("CUSTOMER_PROFILES_ENDPOINT_URL")
            client = boto3.client(
                SERVICE_NAME,
                **compact({"region_name": self.region, "endpoint_url": endpoint_url})
            )
        self.client = client

    def _invoke(self, operation: str, **params: Any) -> Dict[str, Any]:
        """
        Call a Customer Profiles API operation and classify any fault.

        Args:
            operation: boto3 method name (e.g. 'get_domain')
            **params: Request parameters; None values are dropped

        Returns:
            Dict: Raw API response

        Raises:
            CfnError: Classified failure wrapping the original exception
        """
        request = compact(params)
        logger.debug("Calling %s.%s with params=%s", SERVICE_NAME, operation, request)

        try:
            response = getattr(self.client, operation)(**request)
        except ClientError as e:
            logger.error(
                "Customer Profiles API error: operation=%s, code=%s, message=%s",
                operation,
                get_error_code(e),
                e.response.get("Error", {}).get("Message", str(e))
            )
            raise to_cfn_error(e) from e
        except BotoCoreError as e:
            logger.error("Customer Profiles client error: operation=%s, error=%s", operation, str(e))
            raise to_cfn_error(e) from e
        except Exception as e:
            logger.exception("Unexpected error calling %s: %s", operation, str(e))
            raise to_cfn_error(e) from e

        logger.info("Customer Profiles %s succeeded", operation)
        return response or {}

    # Domains

    def get_domain(self, domain_name: str) -> Dict[str, Any]:
        return self._invoke("get_domain", DomainName=domain_name)

    def create_domain(
        self,
        domain_name: str,
        default_expiration_days: Optional[int] = None,
        default_encryption_key: Optional[str] = None,
        dead_letter_queue_url: Optional[str] = None,
        tags: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        return self._invoke(
            "create_domain",
            DomainName=domain_name,
            DefaultExpirationDays=default_expiration_days,
            DefaultEncryptionKey=default_encryption_key,
            DeadLetterQueueUrl=dead_letter_queue_url,
            Tags=tags
        )

    def update_domain(
        self,
        domain_name: str,
        default_expiration_days: Optional[int] = None,
        default_encryption_key: Optional[str] = None,
        dead_letter_queue_url: Optional[str] = None,
        tags: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        return self._invoke(
            "update_domain",
            DomainName=domain_name,
            DefaultExpirationDays=default_expiration_days,
            DefaultEncryptionKey=default_encryption_key,
            DeadLetterQueueUrl=dead_letter_queue_url,
            Tags=tags
        )

    def delete_domain(self, domain_name: str) -> Dict[str, Any]:
        return self._invoke("delete_domain", DomainName=domain_name)

    # Integrations

    def get_integration(self, domain_name: str, uri: str) -> Dict[str, Any]:
        return self._invoke("get_integration", DomainName=domain_name, Uri=uri)

    def put_integration(
        self,
        domain_name: str,
        uri: str,
        object_type_name: Optional[str] = None,
        tags: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        return self._invoke(
            "put_integration",
            DomainName=domain_name,
            Uri=uri,
            ObjectTypeName=object_type_name,
            Tags=tags
        )

    def delete_integration(self, domain_name: str, uri: str) -> Dict[str, Any]:
        return self._invoke("delete_integration", DomainName=domain_name, Uri=uri)

    # Tagging

    def untag_resource(self, resource_arn: str, tag_keys: List[str]) -> Dict[str, Any]:
        return self._invoke("untag_resource", resourceArn=resource_arn, tagKeys=tag_keys)
