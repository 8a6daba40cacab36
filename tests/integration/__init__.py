"""
Integration tests for the Take5 call scheduler.

These tests use mocked AWS services to exercise the scheduling Lambda
end to end: DynamoDB group storage, the scheduling engine and EventBridge.
"""
