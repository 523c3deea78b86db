# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""
Error taxonomy for the Customer Profiles custom resource handlers.

Every fault raised at a Customer Profiles API boundary is classified into
exactly one ErrorKind and re-raised as the matching CfnError subclass. The
Lambda entry point reports the kind's handler error code back to
CloudFormation.
"""

from enum import Enum
from typing import Dict, Optional

from botocore.exceptions import ClientError, ParamValidationError


class ErrorKind(Enum):
    """Caller-facing error kinds, valued by CloudFormation handler error code."""
    INVALID_REQUEST = "InvalidRequest"
    NOT_FOUND = "NotFound"
    SERVICE_INTERNAL_ERROR = "ServiceInternalError"
    GENERAL_SERVICE_EXCEPTION = "GeneralServiceException"

    def __str__(self) -> str:
        return self.value


# Customer Profiles service error codes with a dedicated kind.
# Anything not listed here, throttling included, is a general service exception.
SERVICE_ERROR_KINDS: Dict[str, ErrorKind] = {
    "BadRequestException": ErrorKind.INVALID_REQUEST,
    "ValidationException": ErrorKind.INVALID_REQUEST,
    "ResourceNotFoundException": ErrorKind.NOT_FOUND,
    "InternalServerException": ErrorKind.SERVICE_INTERNAL_ERROR,
}


class CfnError(Exception):
    """Base class for classified handler failures."""

    kind: ErrorKind = ErrorKind.GENERAL_SERVICE_EXCEPTION

    def __init__(self, message: str, kind: Optional[ErrorKind] = None):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind

    @property
    def error_code(self) -> str:
        return self.kind.value

    def to_dict(self) -> Dict[str, str]:
        """Convert the error to CloudFormation response Data."""
        return {
            "ErrorCode": self.error_code,
            "Error": self.message,
        }


class CfnInvalidRequestError(CfnError):
    kind = ErrorKind.INVALID_REQUEST


class CfnNotFoundError(CfnError):
    kind = ErrorKind.NOT_FOUND


class CfnServiceInternalError(CfnError):
    kind = ErrorKind.SERVICE_INTERNAL_ERROR


class CfnGeneralServiceError(CfnError):
    kind = ErrorKind.GENERAL_SERVICE_EXCEPTION


ERROR_CLASSES = {
    ErrorKind.INVALID_REQUEST: CfnInvalidRequestError,
    ErrorKind.NOT_FOUND: CfnNotFoundError,
    ErrorKind.SERVICE_INTERNAL_ERROR: CfnServiceInternalError,
    ErrorKind.GENERAL_SERVICE_EXCEPTION: CfnGeneralServiceError,
}


def get_error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "Unknown")


def get_error_message(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Message", str(error))


def classify_error(error: BaseException) -> ErrorKind:
    """
    Classify a fault from a remote call into one of the four error kinds.

    Args:
        error: Exception raised by the Customer Profiles client or the code around it

    Returns:
        ErrorKind: The kind CloudFormation should be told about
    """
    if isinstance(error, CfnError):
        return error.kind
    if isinstance(error, ClientError):
        return SERVICE_ERROR_KINDS.get(get_error_code(error), ErrorKind.GENERAL_SERVICE_EXCEPTION)
    if isinstance(error, ParamValidationError):
        return ErrorKind.INVALID_REQUEST
    return ErrorKind.GENERAL_SERVICE_EXCEPTION


def to_cfn_error(error: BaseException) -> CfnError:
    """
    Wrap a fault in the CfnError subclass matching its classification.

    CfnError instances are returned unchanged.
    """
    if isinstance(error, CfnError):
        return error

    kind = classify_error(error)
    if isinstance(error, ClientError):
        message = f"{get_error_code(error)}: {get_error_message(error)}"
    else:
        message = str(error) or type(error).__name__
    return ERROR_CLASSES[kind](message)
