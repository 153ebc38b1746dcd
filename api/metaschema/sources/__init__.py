"""Data sources for schema resolution."""

from metaschema.sources.base import SchemaDataSource
from metaschema.sources.sql_source import SqlSchemaDataSource

__all__ = ["SchemaDataSource", "SqlSchemaDataSource"]
