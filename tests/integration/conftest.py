"""
Integration test fixtures and configuration.

Integration tests run the real tools against moto-mocked AWS services.
"""

import json
from typing import Callable

import pytest

from take5.shared.models.group import Group


@pytest.fixture
def aws_env(mock_aws_all):
    """Mocked groups table and event bus."""
    return mock_aws_all


@pytest.fixture
def store_groups(aws_env) -> Callable[..., list[Group]]:
    """Save groups through the DynamoDB tool."""
    from take5.shared.tools.dynamodb import save_group

    def _store(*groups: Group) -> list[Group]:
        return [save_group(group) for group in groups]

    return _store


@pytest.fixture
def call_due_queue(aws_env, aws_credentials):
    """
    SQS queue subscribed to CallDue events on the test bus.

    Yields a function draining the queue into a list of event details.
    """
    import boto3

    sqs = boto3.client("sqs", **aws_credentials)
    queue_url = sqs.create_queue(QueueName="call-due")["QueueUrl"]
    queue_arn = sqs.get_queue_attributes(
        QueueUrl=queue_url, AttributeNames=["QueueArn"]
    )["Attributes"]["QueueArn"]

    events = aws_env["events"]
    events.put_rule(
        Name="call-due-rule",
        EventBusName="test-take5",
        EventPattern=json.dumps({"detail-type": ["CallDue"]}),
        State="ENABLED",
    )
    events.put_targets(
        Rule="call-due-rule",
        EventBusName="test-take5",
        Targets=[{"Id": "call-due-queue", "Arn": queue_arn}],
    )

    def _drain() -> list[dict]:
        details = []
        while True:
            response = sqs.receive_message(QueueUrl=queue_url, MaxNumberOfMessages=10)
            messages = response.get("Messages", [])
            if not messages:
                return details
            for message in messages:
                details.append(json.loads(message["Body"])["detail"])
                sqs.delete_message(QueueUrl=queue_url, ReceiptHandle=message["ReceiptHandle"])

    return _drain
