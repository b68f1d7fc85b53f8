"""
Use cases - Base class for application-layer workflows.
"""

from abc import ABC, abstractmethod
from typing import Any


class UseCase(ABC):  # pylint: disable=too-few-public-methods
    """
    Base class for use cases.

    A use case coordinates ports (interfaces) to perform one workflow.
    Concrete adapters are injected through the constructor.
    """

    @abstractmethod
    def execute(self) -> Any:
        """Run the workflow once."""
