"""Datasource contract and the array-backed reference implementation."""

from .base import Datasource, DatasourceEvents
from .search import insertion_point
from .simple import SimpleDatasource

__all__ = [
    "Datasource",
    "DatasourceEvents",
    "SimpleDatasource",
    "insertion_point",
]
