"""MongoDB backend strategy."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

from pymongo import ASCENDING, DESCENDING, MongoClient, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import ConfigurationError, DuplicateKeyError, PyMongoError

from fx_rates.db.base_backend import BackendStrategy
from fx_rates.errors import InfrastructureError
from fx_rates.models import ExchangeRate
from fx_rates.utils.logger import get_logger

LOGGER = get_logger(__name__)

# Documents keep the field names used by the existing rates service
# (``src``/``tgt``/``createdAt``/``updatedAt``) so both can share a collection.
COLLECTION_NAME = "exchangerates"
KEY_INDEX = [("src", ASCENDING), ("tgt", ASCENDING), ("date", ASCENDING)]


class MongoBackend(BackendStrategy):
    """Backend strategy that persists exchange rates inside MongoDB."""

    def __init__(self, url: str, *, database: str | None = None) -> None:
        self.url = url
        self._client = MongoClient(url)
        if database is None:
            try:
                db = self._client.get_default_database()
            except ConfigurationError as exc:
                self._client.close()
                raise ValueError(
                    "MongoDB connection URI must include a database name "
                    "(mongodb://host:27017/forex or ?DATABASE_NAME=forex)"
                ) from exc
        else:
            db = self._client[database]
        self._collection: Collection = db[COLLECTION_NAME]

    def ensure_schema(self) -> None:
        try:
            LOGGER.info("Ensuring MongoDB %s collection exists", COLLECTION_NAME)
            self._client.admin.command("ping")
            self._collection.create_index(KEY_INDEX, unique=True)
        except PyMongoError as exc:
            raise InfrastructureError(f"Failed to ensure MongoDB schema: {exc}") from exc

    def find_latest(self, source: str, target: str) -> ExchangeRate | None:
        try:
            doc = self._collection.find_one(
                {"src": source, "tgt": target}, sort=[("date", DESCENDING)]
            )
        except PyMongoError as exc:
            raise InfrastructureError(f"Failed to query MongoDB rates: {exc}") from exc
        return None if doc is None else _record_from_document(doc)

    def upsert(self, source: str, target: str, rate_date: str, rate: float) -> ExchangeRate:
        now = datetime.now(timezone.utc)
        key = {"src": source, "tgt": target, "date": rate_date}
        update = {
            "$set": {"rate": rate, "updatedAt": now},
            "$setOnInsert": {"createdAt": now},
        }
        try:
            try:
                doc = self._find_one_and_upsert(key, update)
            except DuplicateKeyError:
                # Two upserts raced to insert the key; the retry matches the winner's row.
                LOGGER.debug("Retrying upsert for %s→%s on %s after duplicate key", source, target, rate_date)
                doc = self._find_one_and_upsert(key, update)
        except PyMongoError as exc:
            raise InfrastructureError(f"Failed to upsert MongoDB rate: {exc}") from exc
        LOGGER.info("Stored %s→%s rate %s for %s", source, target, rate, rate_date)
        return _record_from_document(doc)

    def _find_one_and_upsert(self, key: dict[str, str], update: dict[str, Any]) -> Mapping[str, Any]:
        return self._collection.find_one_and_update(
            key, update, upsert=True, return_document=ReturnDocument.AFTER
        )

    def delete_one(self, source: str, target: str, rate_date: str) -> ExchangeRate | None:
        try:
            doc = self._collection.find_one_and_delete({"src": source, "tgt": target, "date": rate_date})
        except PyMongoError as exc:
            raise InfrastructureError(f"Failed to delete MongoDB rate: {exc}") from exc
        if doc is None:
            return None
        LOGGER.info("Deleted %s→%s rate for %s", source, target, rate_date)
        return _record_from_document(doc)

    def close(self) -> None:  # pragma: no cover - trivial cleanup
        self._client.close()


def _record_from_document(doc: Mapping[str, Any]) -> ExchangeRate:
    return ExchangeRate(
        source=doc["src"],
        target=doc["tgt"],
        rate=float(doc["rate"]),
        date=doc["date"],
        created_at=doc.get("createdAt"),
        updated_at=doc.get("updatedAt"),
    )


__all__ = ["COLLECTION_NAME", "MongoBackend"]
