r"""Filesystem adapter for the DocumentSink protocol.

Writes rendered Markdown documents into the per-customer workspace with a
predictable layout::

    {base_path}/{customer}/{placement_path}/{document_name}.md
    {base_path}/{customer}/servers/{instance}.md      (raw uploads)

Usage
-----
Create a sink and write a document:

>>> from pathlib import Path
>>> from datapushgateway.reporting.filesystem_sink import FilesystemDocumentSink
>>> from datapushgateway.reporting.sink import DocumentLocation
>>>
>>> sink = FilesystemDocumentSink(Path("/var/lib/datapushgateway/data"))
>>> location = DocumentLocation(
...     customer_id="acme",
...     placement_path="master/checks",
...     document_name="health",
... )
>>> sink.ensure_directory(location)
>>> sink.write_document(location, "# CPU Load\n```\n95%\n```\n")

"""

from __future__ import annotations

import typing as typ

from datapushgateway.errors import DocumentWriteError

if typ.TYPE_CHECKING:
    from pathlib import Path

    from datapushgateway.reporting.sink import DocumentLocation

SERVERS_DIRECTORY = "servers"


class FilesystemDocumentSink:
    """Write documents to the local filesystem.

    Parameters
    ----------
    base_path
        Root directory holding one workspace per customer.

    """

    def __init__(self, base_path: Path) -> None:
        """Initialise the sink with a base directory path."""
        self._base_path = base_path

    @property
    def base_path(self) -> Path:
        """Root directory of all customer workspaces."""
        return self._base_path

    def _directory(self, location: DocumentLocation) -> Path:
        return self._base_path / location.customer_id / location.placement_path

    def ensure_directory(self, location: DocumentLocation) -> Path:
        """Create ``{customer}/{placement_path}`` recursively, idempotently.

        Raises
        ------
        DocumentWriteError
            If the directory cannot be created.

        """
        directory = self._directory(location)
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            msg = f"cannot create directory {directory}: {exc}"
            raise DocumentWriteError(location.document_name, msg) from exc
        return directory

    def write_document(self, location: DocumentLocation, markdown: str) -> Path:
        """Write the document as UTF-8, replacing any previous content.

        Raises
        ------
        DocumentWriteError
            If the file cannot be written.

        """
        path = self._directory(location) / location.filename
        try:
            path.write_text(markdown, encoding="utf-8")
        except OSError as exc:
            msg = f"cannot write {path}: {exc}"
            raise DocumentWriteError(location.document_name, msg) from exc
        return path

    def remove_document(self, location: DocumentLocation) -> Path | None:
        """Delete a stale document; a missing file is not an error.

        Returns
        -------
        Path | None
            The removed path, or ``None`` when there was nothing to remove.

        Raises
        ------
        DocumentWriteError
            If an existing file cannot be removed.

        """
        path = self._directory(location) / location.filename
        try:
            path.unlink()
        except FileNotFoundError:
            return None
        except OSError as exc:
            msg = f"cannot remove stale {path}: {exc}"
            raise DocumentWriteError(location.document_name, msg) from exc
        return path

    def write_server_blob(
        self, customer_id: str, instance_id: str, body: bytes
    ) -> Path:
        """Store a raw upload at ``{customer}/servers/{instance}.md``.

        Raises
        ------
        DocumentWriteError
            If the directory or file cannot be written.

        """
        directory = self._base_path / customer_id / SERVERS_DIRECTORY
        path = directory / f"{instance_id}.md"
        try:
            directory.mkdir(parents=True, exist_ok=True)
            path.write_bytes(body)
        except OSError as exc:
            msg = f"cannot store upload at {path}: {exc}"
            raise DocumentWriteError(instance_id, msg) from exc
        return path
