# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""
Helper modules for the Customer Profiles custom resource Lambda.

This package contains:
- customer_profiles_client: boto3 wrapper with a single classified invocation path
- errors: ErrorKind taxonomy and CfnError exceptions
"""

from helpers.customer_profiles_client import (
    CustomerProfilesClient,
    get_customer_profiles_client,
    reset_customer_profiles_client,
)
from helpers.errors import (
    CfnError,
    CfnGeneralServiceError,
    CfnInvalidRequestError,
    CfnNotFoundError,
    CfnServiceInternalError,
    ErrorKind,
    classify_error,
    to_cfn_error,
)

__all__ = [
    "CustomerProfilesClient",
    "get_customer_profiles_client",
    "reset_customer_profiles_client",
    "CfnError",
    "CfnGeneralServiceError",
    "CfnInvalidRequestError",
    "CfnNotFoundError",
    "CfnServiceInternalError",
    "ErrorKind",
    "classify_error",
    "to_cfn_error",
]
