"""Route records to report documents using the taxonomy."""

from __future__ import annotations

import typing as typ

from datapushgateway.logging import get_logger, log_debug, log_warning

if typ.TYPE_CHECKING:
    from datapushgateway.taxonomy.models import Taxonomy

    from .models import Record

logger = get_logger(__name__)

type DocumentGroup = dict[str, list[Record]]


def classify(records: typ.Iterable[Record], taxonomy: Taxonomy) -> DocumentGroup:
    """Group records by the report documents they belong to.

    The record's tag is resolved against the taxonomy case-insensitively,
    first match wins. The record is then appended to every document whose
    tag list contains the resolved tag, so one tag may feed several
    documents. Records whose tag matches nothing are logged and dropped.

    Parameters
    ----------
    records
        Records in arrival order.
    taxonomy
        Taxonomy resolved for the current instance.

    Returns
    -------
    DocumentGroup
        Document name to records, each list in arrival order. Documents
        without records are absent.

    """
    group: DocumentGroup = {}
    for record in records:
        resolved = taxonomy.resolve_tag(record.tag)
        if resolved is None:
            log_warning(
                logger,
                "Dropping record %r: monitor tag %r is not in the taxonomy",
                record.description,
                record.tag,
            )
            continue
        for entry in taxonomy.entries_for_tag(resolved):
            group.setdefault(entry.document_name, []).append(record)

    for document, items in group.items():
        log_debug(logger, "Grouped %d record(s) into %s", len(items), document)
    return group
