"""Function execution port — abstract interface for the hosted email function.

Emails are rendered and delivered by a function running on the managed
backend. The storefront only triggers an execution with a JSON body.
"""

from abc import ABC, abstractmethod


class FunctionExecutionPort(ABC):
    """Abstract interface for hosted function execution adapters."""

    @abstractmethod
    def create_execution(self, function_id: str, body: str, asynchronous: bool = True) -> dict:
        """Trigger one execution of ``function_id`` with ``body``.

        Returns:
            dict with keys: execution_id, status ("queued" or "failed"), error (optional)
        """
        ...
