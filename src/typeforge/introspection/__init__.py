from typeforge.introspection.contract import (
    FieldDescriptor,
    FieldShape,
    PrimitiveKind,
    SchemaProvider,
    TypeShape,
)
from typeforge.introspection.annotations import AnnotationSchemaProvider
from typeforge.introspection.source import (
    ParseFailureWitness,
    SourceIndex,
    SourceSchemaProvider,
    iter_python_paths,
)

__all__ = [
    "AnnotationSchemaProvider",
    "FieldDescriptor",
    "FieldShape",
    "ParseFailureWitness",
    "PrimitiveKind",
    "SchemaProvider",
    "SourceIndex",
    "SourceSchemaProvider",
    "TypeShape",
    "iter_python_paths",
]
