"""EntityLens - reflective record introspection.

Describes record changes as audit messages, builds query-by-example clauses
and URL parameters, substitutes named parameters and evaluates predicate
expressions, all driven by per-type field metadata.
"""

__version__ = "0.1.0"

from entitylens.core.rules import evaluate_expression
from entitylens.domain.entities import (
    AuditMessage,
    BaseEntity,
    CodedReference,
    FieldDescriptor,
    RecordSnapshot,
)
from entitylens.domain.services import (
    AuditDiffService,
    EntityCopier,
    FieldPathResolver,
    ParameterSubstitution,
    QueryBuilder,
    ValueNormalizer,
)
from entitylens.infrastructure.metadata import InMemoryMetadataCatalog

__all__ = [
    "AuditDiffService",
    "AuditMessage",
    "BaseEntity",
    "CodedReference",
    "EntityCopier",
    "FieldDescriptor",
    "FieldPathResolver",
    "InMemoryMetadataCatalog",
    "ParameterSubstitution",
    "QueryBuilder",
    "RecordSnapshot",
    "ValueNormalizer",
    "evaluate_expression",
    "__version__",
]
