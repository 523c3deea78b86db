# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

"""
Unit tests for the domain and integration update pipelines.

The boto3 client is replaced by a MagicMock so every Customer Profiles call
can be inspected or made to fail with a specific service error code.
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from core import domain_handler, integration_handler
from core.models import DomainModel, IntegrationModel
from core.translator import StackLocation
from helpers.customer_profiles_client import CustomerProfilesClient
from helpers.errors import (
    CfnGeneralServiceError,
    CfnInvalidRequestError,
    CfnNotFoundError,
    CfnServiceInternalError,
)


TIME = datetime(2024, 5, 1, 12, 30, 0, tzinfo=timezone.utc)
DOMAIN_NAME = "testDomainName"
OBJECT_TYPE_NAME = "testObjectType"
URI = "arn:aws:flow:us-east-1:123456789012:URIOfIntegration1"
PREVIOUS_TAGS = {"Key1": "Value1", "Key2": "Value2"}
DESIRED_TAGS = {"Key2": "Value4", "Key3": "Value3"}
LOCATION = StackLocation(partition="aws", region="us-east-1", account_id="123456789012")

FAULTS = [
    ("BadRequestException", CfnInvalidRequestError),
    ("InternalServerException", CfnServiceInternalError),
    ("ResourceNotFoundException", CfnNotFoundError),
    ("ThrottlingException", CfnGeneralServiceError),
]


def client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


# =============================================================================
# Test Fixtures
# =============================================================================


@pytest.fixture
def boto_client():
    """Mock boto3 customer-profiles client with successful default responses."""
    client = MagicMock()
    client.get_domain.return_value = {"DomainName": DOMAIN_NAME}
    client.untag_resource.return_value = {}
    client.get_integration.return_value = {"DomainName": DOMAIN_NAME, "Uri": URI}
    return client


@pytest.fixture
def client(boto_client):
    return CustomerProfilesClient(region="us-east-1", client=boto_client)


@pytest.fixture
def domain_model():
    return DomainModel(
        domain_name=DOMAIN_NAME,
        dead_letter_queue_url="https://sqs.us-east-1.amazonaws.com/123456789012/dlq",
        default_encryption_key="arn:aws:kms:us-east-1:123456789012:key/abc",
        default_expiration_days=10,
    )


@pytest.fixture
def integration_model():
    return IntegrationModel(
        domain_name=DOMAIN_NAME,
        object_type_name=OBJECT_TYPE_NAME,
        uri=URI,
    )


def update_domain_response(tags=None):
    response = {
        "DomainName": DOMAIN_NAME,
        "DeadLetterQueueUrl": "https://sqs.us-east-1.amazonaws.com/123456789012/dlq",
        "DefaultEncryptionKey": "arn:aws:kms:us-east-1:123456789012:key/abc",
        "DefaultExpirationDays": 10,
        "CreatedAt": TIME,
        "LastUpdatedAt": TIME,
    }
    if tags is not None:
        response["Tags"] = tags
    return response


def put_integration_response(tags=None):
    response = {
        "DomainName": DOMAIN_NAME,
        "Uri": URI,
        "ObjectTypeName": OBJECT_TYPE_NAME,
        "CreatedAt": TIME,
        "LastUpdatedAt": TIME,
    }
    if tags is not None:
        response["Tags"] = tags
    return response


# =============================================================================
# Unit Tests - Domain Update
# =============================================================================


class TestDomainUpdate:
    """Tests for the domain update pipeline."""

    def test_simple_success(self, client, boto_client, domain_model):
        """Previous tags are removed and desired tags are sent with UpdateDomain."""
        boto_client.update_domain.return_value = update_domain_response(DESIRED_TAGS)

        result = domain_handler.handle_update(
            domain_model, PREVIOUS_TAGS, DESIRED_TAGS, LOCATION, client
        )

        boto_client.get_domain.assert_called_once_with(DomainName=DOMAIN_NAME)
        boto_client.untag_resource.assert_called_once_with(
            resourceArn=f"arn:aws:profile:us-east-1:123456789012:domains/{DOMAIN_NAME}",
            tagKeys=["Key1", "Key2"]
        )
        update_kwargs = boto_client.update_domain.call_args[1]
        assert update_kwargs["Tags"] == DESIRED_TAGS
        assert update_kwargs["DomainName"] == DOMAIN_NAME
        assert update_kwargs["DefaultExpirationDays"] == 10

        assert result.domain_name == DOMAIN_NAME
        assert result.created_at == "2024-05-01T12:30:00Z"
        assert result.last_updated_at == "2024-05-01T12:30:00Z"
        assert {tag.key: tag.value for tag in result.tags} == DESIRED_TAGS
        for tag in result.tags:
            assert tag.value == DESIRED_TAGS[tag.key]

    @pytest.mark.parametrize("previous_tags", [None, {}])
    def test_no_previous_tags_skips_untag(self, client, boto_client, domain_model, previous_tags):
        """No UntagResource call when there is nothing to remove."""
        boto_client.update_domain.return_value = update_domain_response(DESIRED_TAGS)

        result = domain_handler.handle_update(
            domain_model, previous_tags, DESIRED_TAGS, LOCATION, client
        )

        boto_client.untag_resource.assert_not_called()
        assert boto_client.update_domain.call_args[1]["Tags"] == DESIRED_TAGS
        assert result.tags[0].value == DESIRED_TAGS[result.tags[0].key]

    @pytest.mark.parametrize("desired_tags", [None, {}])
    def test_no_desired_tags_omits_tags(self, client, boto_client, domain_model, desired_tags):
        """Null and empty desired tags both leave Tags out of UpdateDomain."""
        boto_client.update_domain.return_value = update_domain_response()

        result = domain_handler.handle_update(
            domain_model, PREVIOUS_TAGS, desired_tags, LOCATION, client
        )

        boto_client.untag_resource.assert_called_once()
        assert "Tags" not in boto_client.update_domain.call_args[1]
        assert result.tags is None

    def test_unset_fields_are_not_sent(self, client, boto_client):
        """Optional fields left unset are dropped from the request."""
        boto_client.update_domain.return_value = update_domain_response()

        domain_handler.handle_update(
            DomainModel(domain_name=DOMAIN_NAME), None, None, LOCATION, client
        )

        assert boto_client.update_domain.call_args[1] == {"DomainName": DOMAIN_NAME}

    @pytest.mark.parametrize("code,expected", FAULTS)
    def test_get_domain_fault(self, client, boto_client, domain_model, code, expected):
        """An existence-check fault is classified and nothing is mutated."""
        boto_client.get_domain.side_effect = client_error(code, "GetDomain")

        with pytest.raises(expected):
            domain_handler.handle_update(
                domain_model, PREVIOUS_TAGS, DESIRED_TAGS, LOCATION, client
            )

        boto_client.untag_resource.assert_not_called()
        boto_client.update_domain.assert_not_called()

    @pytest.mark.parametrize("code,expected", FAULTS)
    def test_update_domain_fault(self, client, boto_client, domain_model, code, expected):
        """An UpdateDomain fault is classified and removed tags stay removed."""
        boto_client.update_domain.side_effect = client_error(code, "UpdateDomain")

        with pytest.raises(expected):
            domain_handler.handle_update(
                domain_model, PREVIOUS_TAGS, {}, LOCATION, client
            )

        boto_client.untag_resource.assert_called_once()
        boto_client.tag_resource.assert_not_called()

    @pytest.mark.parametrize("code,expected", FAULTS)
    def test_untag_fault(self, client, boto_client, domain_model, code, expected):
        """An UntagResource fault is classified and UpdateDomain is never issued."""
        boto_client.untag_resource.side_effect = client_error(code, "UntagResource")

        with pytest.raises(expected):
            domain_handler.handle_update(
                domain_model, PREVIOUS_TAGS, DESIRED_TAGS, LOCATION, client
            )

        boto_client.update_domain.assert_not_called()

    def test_missing_domain_name(self, client, boto_client):
        """A model without DomainName fails before any API call."""
        with pytest.raises(CfnInvalidRequestError):
            domain_handler.handle_update(DomainModel(), None, None, LOCATION, client)

        boto_client.get_domain.assert_not_called()


# =============================================================================
# Unit Tests - Integration Update
# =============================================================================


class TestIntegrationUpdate:
    """Tests for the integration update pipeline."""

    def test_simple_success(self, client, boto_client, integration_model):
        """Previous tags are removed and desired tags are sent with PutIntegration."""
        boto_client.put_integration.return_value = put_integration_response(DESIRED_TAGS)

        result = integration_handler.handle_update(
            integration_model, PREVIOUS_TAGS, DESIRED_TAGS, LOCATION, client
        )

        boto_client.get_integration.assert_called_once_with(DomainName=DOMAIN_NAME, Uri=URI)
        boto_client.untag_resource.assert_called_once_with(
            resourceArn=(
                f"arn:aws:profile:us-east-1:123456789012:domains/{DOMAIN_NAME}"
                f"/integrations/{URI}"
            ),
            tagKeys=["Key1", "Key2"]
        )
        boto_client.put_integration.assert_called_once_with(
            DomainName=DOMAIN_NAME,
            Uri=URI,
            ObjectTypeName=OBJECT_TYPE_NAME,
            Tags=DESIRED_TAGS
        )
        assert result.uri == URI
        assert result.object_type_name == OBJECT_TYPE_NAME
        assert result.tags[0].value == DESIRED_TAGS[result.tags[0].key]

    @pytest.mark.parametrize("previous_tags", [None, {}])
    def test_previous_tags_absent(self, client, boto_client, integration_model, previous_tags):
        boto_client.put_integration.return_value = put_integration_response(DESIRED_TAGS)

        result = integration_handler.handle_update(
            integration_model, previous_tags, DESIRED_TAGS, LOCATION, client
        )

        boto_client.untag_resource.assert_not_called()
        assert result.tags[0].value == DESIRED_TAGS[result.tags[0].key]

    @pytest.mark.parametrize("desired_tags", [None, {}])
    def test_desired_tags_absent(self, client, boto_client, integration_model, desired_tags):
        boto_client.put_integration.return_value = put_integration_response()

        result = integration_handler.handle_update(
            integration_model, PREVIOUS_TAGS, desired_tags, LOCATION, client
        )

        assert "Tags" not in boto_client.put_integration.call_args[1]
        assert result.tags is None

    @pytest.mark.parametrize("code,expected", FAULTS)
    def test_put_integration_fault(self, client, boto_client, integration_model, code, expected):
        """A PutIntegration fault is classified and removed tags stay removed."""
        boto_client.put_integration.side_effect = client_error(code, "PutIntegration")

        with pytest.raises(expected):
            integration_handler.handle_update(
                integration_model, PREVIOUS_TAGS, {}, LOCATION, client
            )

        boto_client.untag_resource.assert_called_once()
        boto_client.tag_resource.assert_not_called()
        boto_client.put_integration.assert_called_once()

    @pytest.mark.parametrize("code,expected", FAULTS)
    def test_untag_fault(self, client, boto_client, integration_model, code, expected):
        """An UntagResource fault is classified and PutIntegration is never issued."""
        boto_client.untag_resource.side_effect = client_error(code, "UntagResource")

        with pytest.raises(expected):
            integration_handler.handle_update(
                integration_model, PREVIOUS_TAGS, DESIRED_TAGS, LOCATION, client
            )

        boto_client.get_integration.assert_called_once()
        boto_client.put_integration.assert_not_called()

    @pytest.mark.parametrize("code,expected", FAULTS)
    def test_get_integration_fault(self, client, boto_client, integration_model, code, expected):
        boto_client.get_integration.side_effect = client_error(code, "GetIntegration")

        with pytest.raises(expected):
            integration_handler.handle_update(
                integration_model, PREVIOUS_TAGS, {}, LOCATION, client
            )

        boto_client.put_integration.assert_not_called()

    def test_missing_uri(self, client, boto_client):
        with pytest.raises(CfnInvalidRequestError) as excinfo:
            integration_handler.handle_update(
                IntegrationModel(domain_name=DOMAIN_NAME), None, None, LOCATION, client
            )

        assert "Uri" in str(excinfo.value)
        boto_client.get_integration.assert_not_called()


# =============================================================================
# Unit Tests - Create and Delete
# =============================================================================


class TestCreateAndDelete:
    """Tests for the create and delete operations of both resource types."""

    def test_create_domain_sends_tags(self, client, boto_client, domain_model):
        domain_model.tags = None
        boto_client.create_domain.return_value = update_domain_response()

        result = domain_handler.handle_create(domain_model, client)

        assert "Tags" not in boto_client.create_domain.call_args[1]
        assert result.default_expiration_days == 10

    def test_create_integration(self, client, boto_client, integration_model):
        boto_client.put_integration.return_value = put_integration_response()

        result = integration_handler.handle_create(integration_model, client)

        boto_client.get_integration.assert_not_called()
        assert result.domain_name == DOMAIN_NAME

    def test_delete_domain_not_found_is_success(self, client, boto_client, domain_model):
        boto_client.delete_domain.side_effect = client_error(
            "ResourceNotFoundException", "DeleteDomain"
        )

        domain_handler.handle_delete(domain_model, client)

        boto_client.delete_domain.assert_called_once_with(DomainName=DOMAIN_NAME)

    def test_delete_domain_other_fault(self, client, boto_client, domain_model):
        boto_client.delete_domain.side_effect = client_error(
            "InternalServerException", "DeleteDomain"
        )

        with pytest.raises(CfnServiceInternalError):
            domain_handler.handle_delete(domain_model, client)

    def test_delete_integration_not_found_is_success(self, client, boto_client, integration_model):
        boto_client.delete_integration.side_effect = client_error(
            "ResourceNotFoundException", "DeleteIntegration"
        )

        integration_handler.handle_delete(integration_model, client)

        boto_client.delete_integration.assert_called_once_with(DomainName=DOMAIN_NAME, Uri=URI)
