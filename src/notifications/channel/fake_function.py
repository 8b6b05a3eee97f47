"""Fake function execution adapter — records executions for testing."""

import json
from uuid import uuid4

from notifications.channel.function_port import FunctionExecutionPort


class FakeFunctionAdapter(FunctionExecutionPort):
    """Function adapter that records executions in memory for test assertions."""

    def __init__(self):
        self.executions: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Function execution failed"
        self.raise_errors = False

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Function execution failed",
        raise_errors: bool = False,
    ):
        """Configure the fake adapter behavior for testing.

        With ``raise_errors`` the adapter raises instead of returning a
        failed result, like a transport error from the backend SDK.
        """
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.raise_errors = raise_errors

    def create_execution(self, function_id: str, body: str, asynchronous: bool = True) -> dict:
        if not self.should_succeed:
            if self.raise_errors:
                raise ConnectionError(self.failure_reason)
            return {"execution_id": None, "status": "failed", "error": self.failure_reason}

        execution_id = f"exec-{uuid4().hex[:12]}"
        self.executions.append(
            {
                "execution_id": execution_id,
                "function_id": function_id,
                "body": json.loads(body),
                "asynchronous": asynchronous,
            }
        )
        return {"execution_id": execution_id, "status": "queued"}

    def of_type(self, email_type: str) -> list[dict]:
        """Executions whose body carries the given email ``type``."""
        return [e for e in self.executions if e["body"].get("type") == email_type]

    def reset(self):
        """Clear recorded executions (useful between tests)."""
        self.executions.clear()
        self.should_succeed = True
        self.failure_reason = "Function execution failed"
        self.raise_errors = False
