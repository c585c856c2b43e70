"""Abstract base class for table connectors."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from lead_metrics.models.record import Record


class BaseConnector(ABC):
    """
    Standard interface for remote table sources.
    All connectors must fetch a whole table and fetch one record by id.
    """

    source_id: str = ""

    @abstractmethod
    def fetch_all(
        self,
        table: str,
        fields: Sequence[str] = (),
        filter_formula: Optional[str] = None,
    ) -> list[Record]:
        """
        Fetch every record of a table, following pagination until exhausted.
        fields restricts which fields are returned; filter_formula is an
        opaque predicate evaluated by the source, when it supports one.
        """
        pass

    @abstractmethod
    def fetch_record(self, table: str, record_id: str) -> Record:
        """
        Fetch one record by its id; raises NotFoundError when absent.
        """
        pass

    def close(self) -> None:
        """Release transport resources. Default: nothing to release."""

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
