"""Lead workload metrics over a paginated tabular backend."""

__version__ = "0.1.0"
