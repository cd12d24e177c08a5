"""Base Step and Pipeline classes for dynquery."""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any


class Step(ABC):
    """Base class for all pipeline steps.

    Steps are lazy: ``process`` returns an iterable that pulls from its input
    only while it is being consumed.
    """

    def __init__(self) -> None:
        self._name: str | None = None

    @abstractmethod
    def process(self, records: Iterable[Any]) -> Iterable[Any]:
        """Process input records and yield output records."""
        ...

    def as_step(self, name: str) -> "Step":
        """Assign a name to this step for logging and debugging."""
        self._name = name
        return self

    def __rshift__(self, other: "Step") -> "Pipeline":
        """Enable >> syntax for chaining steps."""
        return Pipeline([self, other])

    @property
    def name(self) -> str:
        """Return step name (auto-generated if not set)."""
        return self._name or self.__class__.__name__

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class Pipeline(Step):
    """A sequence of steps that form a pipeline."""

    def __init__(self, steps: list[Step]) -> None:
        super().__init__()
        self._steps: list[Step] = steps

    def __rshift__(self, other: Step) -> "Pipeline":
        """Enable >> syntax for appending steps to pipeline."""
        if isinstance(other, Pipeline):
            return Pipeline(self._steps + other._steps)
        return Pipeline(self._steps + [other])

    def process(self, records: Iterable[Any]) -> Iterable[Any]:
        """Process records through all steps in sequence."""
        current = records
        for step in self._steps:
            current = step.process(current)
        return current

    @property
    def steps(self) -> list[Step]:
        """Return the list of steps in this pipeline."""
        return self._steps

    def run(self, records: Iterable[Any]) -> list[Any]:
        """
        Execute the pipeline over records and return all output records.

        Args:
            records: Input records. Consumed once.

        Returns:
            List of output records.
        """
        return list(self.process(records))
