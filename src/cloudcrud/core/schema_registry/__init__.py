"""SchemaRegistry - Table (class) lifecycle for CloudCrud."""

from cloudcrud.core.schema_registry.schema_registry import SchemaRegistry, TableCreation

__all__ = ["SchemaRegistry", "TableCreation"]
