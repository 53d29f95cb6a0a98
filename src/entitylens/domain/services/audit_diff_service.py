"""Audit diff service for describing record changes.

This service builds the HTML audit fragments written when a record is created,
updated or deleted, and reports which fields differ between two snapshots.
Fields are read through the path resolver and compared in normalized form.
"""

from typing import Any

from entitylens.core.logging import get_logger
from entitylens.domain.entities.audit_message import AuditAction, AuditMessage
from entitylens.domain.entities.diff_entry import ChangeKind, DiffEntry
from entitylens.domain.entities.field_descriptor import FieldDescriptor
from entitylens.domain.entities.normalized_value import NormalizedValue, Sequence
from entitylens.domain.exceptions import TypeMismatchWarning
from entitylens.domain.services.metadata_catalog import MetadataCatalog
from entitylens.domain.services.path_resolver import FieldPathResolver
from entitylens.domain.services.value_normalizer import ValueNormalizer

logger = get_logger(__name__)


class AuditDiffService:
    """Builds create, update and delete audit messages.

    The service keeps no state between calls; the catalog is only read.
    """

    def __init__(
        self,
        catalog: MetadataCatalog,
        resolver: FieldPathResolver | None = None,
        normalizer: ValueNormalizer | None = None,
    ) -> None:
        """Initialize the audit diff service.

        Args:
            catalog: Metadata catalog describing the audited types.
            resolver: Path resolver, a default one is created if omitted.
            normalizer: Value normalizer, a default one is created if omitted.
        """
        self.catalog = catalog
        self.resolver = resolver or FieldPathResolver()
        self.normalizer = normalizer or ValueNormalizer()

    def build_create_message(self, entity: Any) -> AuditMessage:
        """Build the audit message for a newly created record.

        Args:
            entity: The created record.

        Returns:
            AuditMessage: Empty when the record's type is not auditable.
        """
        if not self.catalog.is_auditable(entity):
            return AuditMessage(AuditAction.CREATE)

        primary = self.catalog.primary_field(entity)
        fragments = []
        for field in self.catalog.auditable_fields(entity):
            if field.field_name == primary.field_name:
                continue
            value = self._normalized(entity, field)
            if value.is_empty:
                continue
            fragments.append(f"{field.title}=<span class='field-value'>{value.render()}</span> ")

        message = (
            "<p class='add-message'>Added new "
            f"{self._primary_fragment(primary, entity)} with the following: "
            f"{'and '.join(fragments)}</p>"
        )
        return AuditMessage(AuditAction.CREATE, message)

    def build_update_message(self, old: Any, new: Any) -> AuditMessage:
        """Build the audit message for an update.

        Args:
            old: Snapshot of the record before the update.
            new: Snapshot of the record after the update.

        Returns:
            AuditMessage: Empty when no audited field changed.
        """
        fragments = []
        for entry in self._group_by_field(self.diff(old, new)):
            fragment = self._change_fragment(entry)
            if fragment:
                fragments.append(fragment)

        if not fragments:
            logger.debug("No audited changes found", entity_type=type(old).__name__)
            return AuditMessage(AuditAction.UPDATE)

        primary = self.catalog.primary_field(old)
        message = (
            "<p class='change-message'>Changed "
            f"{self._primary_fragment(primary, old)} with the following: "
            f"{'and '.join(fragments)}</p>"
        )
        return AuditMessage(AuditAction.UPDATE, message)

    def build_delete_message(self, entity: Any) -> AuditMessage:
        """Build the audit message for a deleted record."""
        primary = self.catalog.primary_field(entity)
        message = f"<p class='delete-message'>Deleted {self._primary_fragment(primary, entity)}</p>"
        return AuditMessage(AuditAction.DELETE, message)

    def diff(self, old: Any, new: Any) -> list[DiffEntry]:
        """Classify every auditable field between two snapshots.

        The primary field is not compared. Fields whose old and new values
        have incompatible shapes are logged and left out.

        Returns:
            list[DiffEntry]: Entries in catalog order. A collection field with
            both additions and removals yields an ADDED and a REMOVED entry.
        """
        primary = self.catalog.primary_field(old)
        entries: list[DiffEntry] = []
        for field in self.catalog.auditable_fields(old):
            if field.field_name == primary.field_name:
                continue
            logger.debug("Building update entry", field=field.field_name)
            try:
                entries.extend(self._diff_field(field, old, new))
            except TypeMismatchWarning as e:
                logger.warning(
                    "Skipping field in audit diff",
                    field=field.field_name,
                    error=str(e),
                )
        return entries

    def get_updated_fields(self, old: Any, new: Any) -> list[str]:
        """Return names of synchronizable fields whose normalized values differ.

        Values are compared the way :meth:`diff` compares them, so reordering
        a collection is not an update. Unlike :meth:`diff`, fields whose values
        changed shape are reported as updated.
        """
        updated = []
        for field in self.catalog.synchronizable_fields(old):
            try:
                changed = any(entry.is_change for entry in self._diff_field(field, old, new))
            except TypeMismatchWarning:
                changed = True
            if changed:
                updated.append(field.field_name)
        return updated

    def _diff_field(self, field: FieldDescriptor, old: Any, new: Any) -> list[DiffEntry]:
        old_value = self._normalized(old, field)
        new_value = self._normalized(new, field)

        shapes = {old_value.shape, new_value.shape} - {"empty"}
        if len(shapes) > 1:
            raise TypeMismatchWarning(field.field_name, old_value.shape, new_value.shape)

        if "sequence" in shapes:
            added = new_value.difference(old_value) if isinstance(new_value, Sequence) else ()
            removed = old_value.difference(new_value) if isinstance(old_value, Sequence) else ()
            if not added and not removed:
                return [DiffEntry(field, ChangeKind.UNCHANGED, old_value, new_value)]
            entries = []
            if added:
                entries.append(DiffEntry(field, ChangeKind.ADDED, old_value, new_value, added))
            if removed:
                entries.append(DiffEntry(field, ChangeKind.REMOVED, old_value, new_value, removed))
            return entries

        kind = ChangeKind.UNCHANGED if old_value == new_value else ChangeKind.CHANGED
        return [DiffEntry(field, kind, old_value, new_value)]

    def _group_by_field(self, entries: list[DiffEntry]) -> list[list[DiffEntry]]:
        """Group consecutive entries of the same field together."""
        groups: list[list[DiffEntry]] = []
        for entry in entries:
            if groups and groups[-1][0].field.field_name == entry.field.field_name:
                groups[-1].append(entry)
            else:
                groups.append([entry])
        return groups

    def _change_fragment(self, group: list[DiffEntry]) -> str:
        parts = []
        for entry in group:
            title = entry.field.title
            if entry.kind is ChangeKind.ADDED:
                parts.append(
                    f"added {title} <span class='field-values-added'>"
                    f"{Sequence(entry.items).render()}</span> "
                )
            elif entry.kind is ChangeKind.REMOVED:
                parts.append(
                    f"removed {title} <span class='field-values-removed'>"
                    f"{Sequence(entry.items).render()}</span> "
                )
            elif entry.kind is ChangeKind.CHANGED:
                parts.append(self._scalar_fragment(title, entry.old_value, entry.new_value))
        return "and ".join(parts)

    @staticmethod
    def _scalar_fragment(title: str, old_value: NormalizedValue, new_value: NormalizedValue) -> str:
        if new_value.is_empty:
            return f"{title} <span class='field-value-removed'>{old_value.render()}</span> is removed "
        if old_value.is_empty:
            return f"{title} is set to <span class='field-value-to'>{new_value.render()}</span> "
        return (
            f"{title} from <span class='field-value-from'>{old_value.render()}</span> "
            f"to <span class='field-value-to'>{new_value.render()}</span> "
        )

    def _primary_fragment(self, primary: FieldDescriptor, entity: Any) -> str:
        fragment = self.catalog.readable_name(entity)
        value = self._normalized(entity, primary)
        if not value.is_empty:
            fragment += f" with {primary.title}:<span class='primary-field'>{value.render()}</span>"
        return fragment

    def _normalized(self, entity: Any, field: FieldDescriptor) -> NormalizedValue:
        return self.normalizer.normalize(self.resolver.resolve_nullable(entity, field.field_name))
