"""Bill persistence: repository interface and stores."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, Protocol

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .errors import StorageError
from .models import Bill

logger = logging.getLogger(__name__)

STORAGE_KEY = "billing_management_bills"

_bills_adapter = TypeAdapter(list[Bill])


def bills_to_payload(bills: Iterable[Bill]) -> list[dict]:
    """Encode bills as JSON-ready dicts (camelCase keys, ISO dates)."""
    return _bills_adapter.dump_python(list(bills), mode="json", by_alias=True)


def bills_from_payload(payload: list[dict]) -> list[Bill]:
    """Decode bills from JSON-ready dicts. The stored status is ignored."""
    return _bills_adapter.validate_python(payload)


class BillRepository(Protocol):
    """Storage capability used by the lifecycle service.

    Implementations raise StorageError on any failure.
    """

    def load(self) -> list[Bill]:
        ...

    def save_all(self, bills: Iterable[Bill]) -> None:
        ...


class InMemoryRepository:
    """Repository holding bills in memory.

    Bills are deep-copied on the way in and out.
    """

    def __init__(self, bills: Iterable[Bill] = ()):
        self._bills = [bill.model_copy(deep=True) for bill in bills]

    def load(self) -> list[Bill]:
        return [bill.model_copy(deep=True) for bill in self._bills]

    def save_all(self, bills: Iterable[Bill]) -> None:
        self._bills = [bill.model_copy(deep=True) for bill in bills]


class JsonFileRepository:
    """
    Key-value blob store backed by a single JSON document.

    The bill collection lives under ``key``; other keys in the document are
    preserved on save. A missing file is an empty collection.
    """

    def __init__(self, path: Path | str, key: str = STORAGE_KEY):
        self.path = Path(path)
        self.key = key

    def _read_document(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            document = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Could not read {self.path}: {e}") from e
        if not isinstance(document, dict):
            raise StorageError(f"Could not read {self.path}: expected a JSON object")
        return document

    def load(self) -> list[Bill]:
        """Load all bills."""
        payload = self._read_document().get(self.key, [])
        try:
            bills = bills_from_payload(payload)
        except PydanticValidationError as e:
            raise StorageError(f"Corrupted bill data in {self.path}: {e}") from e
        logger.debug("Loaded %d bill(s) from %s", len(bills), self.path)
        return bills

    def save_all(self, bills: Iterable[Bill]) -> None:
        """Replace the stored collection with ``bills``."""
        bills = list(bills)
        document = self._read_document()
        document[self.key] = bills_to_payload(bills)

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(document, f, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Could not write {self.path}: {e}") from e
        logger.debug("Saved %d bill(s) to %s", len(bills), self.path)
