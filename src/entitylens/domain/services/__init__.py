"""Domain services for EntityLens.

Services read records through the path resolver and field metadata through a
metadata catalog. They keep no state between calls.
"""

from entitylens.domain.services.audit_diff_service import AuditDiffService
from entitylens.domain.services.entity_copier import EntityCopier
from entitylens.domain.services.metadata_catalog import MetadataCatalog
from entitylens.domain.services.parameter_substitution import ParameterSubstitution
from entitylens.domain.services.path_resolver import FieldPathResolver, is_collection
from entitylens.domain.services.query_builder import QueryBuilder, escape_sql, identity_literal
from entitylens.domain.services.value_classifier import (
    ClassifiedValue,
    ValueKind,
    classify,
    entity_identity,
)
from entitylens.domain.services.value_normalizer import ValueNormalizer

__all__ = [
    "AuditDiffService",
    "ClassifiedValue",
    "EntityCopier",
    "FieldPathResolver",
    "MetadataCatalog",
    "ParameterSubstitution",
    "QueryBuilder",
    "ValueKind",
    "ValueNormalizer",
    "classify",
    "entity_identity",
    "escape_sql",
    "identity_literal",
    "is_collection",
]
