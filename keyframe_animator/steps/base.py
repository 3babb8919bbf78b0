"""
Abstract base class for pipeline steps.
"""

from abc import ABC, abstractmethod
from typing import TypeVar, Generic

import requests

from ..config import PipelineConfig
from ..errors import FilesystemError, PipelineError, TransportError

# Type variables for input/output types
InputT = TypeVar('InputT')
OutputT = TypeVar('OutputT')


class PipelineStep(ABC, Generic[InputT, OutputT]):
    """
    Abstract base class for all pipeline steps.

    Each step in the pipeline inherits from this class and implements
    the `run` method to perform its specific task.

    Attributes:
        name: Unique identifier for this step, used as the error stage
        config: Pipeline configuration
    """

    name: str = "base_step"
    description: str = "Base pipeline step"

    def __init__(self, config: PipelineConfig):
        """
        Initialize the pipeline step.

        Args:
            config: Pipeline configuration
        """
        self.config = config
        self.status = "pending"
        self.error_message = None

    @abstractmethod
    def run(self, input_data: InputT) -> OutputT:
        """
        Execute the step's main logic.

        Args:
            input_data: Input data from previous step

        Returns:
            Output data to pass to next step
        """
        pass

    def execute(self, input_data: InputT) -> OutputT:
        """
        Execute the step with status tracking.

        Errors leave this method tagged with the step name. OS-level
        failures become FilesystemError and stray requests exceptions
        become TransportError.

        Raises:
            PipelineError: Re-raised after marking the step as failed
        """
        self._mark("running")
        print(f"[{self.name}] started...")
        try:
            result = self.run(input_data)
        except PipelineError as e:
            if e.stage is None:
                e.stage = self.name
            self._fail(e)
            raise
        except requests.RequestException as e:
            error = TransportError(str(e), stage=self.name)
            self._fail(error)
            raise error from e
        except OSError as e:
            error = FilesystemError(str(e), stage=self.name)
            self._fail(error)
            raise error from e
        self._mark("completed")
        print(f"[{self.name}] completed.")
        return result

    def _mark(self, status: str) -> None:
        self.status = status

    def _fail(self, error: PipelineError) -> None:
        self.status = "failed"
        self.error_message = error.message
        print(f"[{self.name}] FAILED: {error.message}")

    @property
    def is_failed(self) -> bool:
        return self.status == "failed"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"
