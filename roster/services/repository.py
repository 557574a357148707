"""Generic document repository shared by every record type."""

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, DuplicateKeyError, PyMongoError

from roster.errors import ConflictError, NotFoundError, RosterError, TransientError
from roster.models.patch import Patch
from roster.models.record import RecordSchema
from roster.schemas.common import FindParams
from roster.services.query_builder import build_list_query
from roster.services.validation import validate_params

logger = logging.getLogger(__name__)

Record = dict[str, Any]


class RecordRepository:
    """CRUD and soft-delete lifecycle for one collection of documents.

    Each operation is at most one round trip to the database; nothing is
    retried. Hidden fields are stripped from everything returned.
    """

    def __init__(self, db: Database, schema: RecordSchema):
        self.db = db
        self.schema = schema
        self.hooks = schema.hooks

    @property
    def collection(self) -> Collection:
        return self.db[self.schema.collection]

    @contextmanager
    def _driver_errors(self, action: str) -> Iterator[None]:
        """Translate driver failures into domain errors."""
        try:
            yield
        except DuplicateKeyError as e:
            logger.warning(f"Duplicate key on {action} in {self.schema.collection}: {e}")
            raise ConflictError() from e
        except ConnectionFailure as e:
            logger.error(f"Database unavailable during {action} in {self.schema.collection}: {e}")
            raise TransientError() from e
        except PyMongoError as e:
            logger.error(f"Database error during {action} in {self.schema.collection}: {e}")
            raise RosterError() from e

    def _object_id(self, key: str) -> ObjectId:
        if not ObjectId.is_valid(key):
            raise NotFoundError()
        return ObjectId(key)

    def _to_record(self, document: Mapping[str, Any] | None) -> Record:
        if document is None:
            raise NotFoundError()
        return self.schema.to_record(dict(document))

    def find(self, params: FindParams | Mapping[str, Any]) -> list[Record]:
        """List records matching optional search, sort and limit."""
        if not isinstance(params, FindParams):
            params = validate_params(FindParams, params)

        query = build_list_query(
            self.schema.collection,
            search=params.search,
            sort_by=params.sort_by,
            limit=params.limit,
            search_field=self.schema.searchable,
            hidden=self.schema.hidden,
        )
        with self._driver_errors("find"):
            documents = list(self.collection.aggregate(query.pipeline))
        return [self.schema.to_record(document) for document in documents]

    def show(self, key: str) -> Record:
        """Get exactly one record by key."""
        oid = self._object_id(key)
        with self._driver_errors("show"):
            document = self.collection.find_one({"_id": oid}, projection=self.schema.projection())
        return self._to_record(document)

    def create(self, values: Mapping[str, Any]) -> Record:
        """Insert a new record and return it as stored."""
        values = self.schema.writable(self.hooks.prepare(dict(values)))
        document = self.hooks.stamp_created(values)
        with self._driver_errors("create"):
            result = self.collection.insert_one(document)
        document["_id"] = result.inserted_id
        logger.info(f"Created {self.schema.document_id(str(result.inserted_id))}")
        return self._to_record(document)

    def _apply(self, key: str, patch: Patch, action: str) -> Record:
        oid = self._object_id(key)
        with self._driver_errors(action):
            document = self.collection.find_one_and_update(
                {"_id": oid},
                patch.to_update(),
                projection=self.schema.projection(),
                return_document=ReturnDocument.AFTER,
            )
        record = self._to_record(document)
        logger.info(f"Applied {action} to {record['id']}")
        return record

    def update(self, key: str, patch: Patch) -> Record:
        """Apply a partial update; fields the patch leaves untouched are kept."""
        prepared = self.schema.restrict(self.hooks.prepare_patch(patch))
        return self._apply(key, self.hooks.stamp_modified(prepared), "update")

    def trash(self, key: str) -> Record:
        """Soft delete: stamp deleted_at."""
        return self._apply(key, self.hooks.trash_patch(), "trash")

    def restore(self, key: str) -> Record:
        """Undo a soft delete by removing deleted_at."""
        return self._apply(key, self.hooks.restore_patch(), "restore")

    def erase(self, key: str) -> Record:
        """Permanently delete; returns the document as it was before removal."""
        oid = self._object_id(key)
        with self._driver_errors("erase"):
            document = self.collection.find_one_and_delete(
                {"_id": oid}, projection=self.schema.projection()
            )
        record = self._to_record(document)
        logger.info(f"Erased {record['id']}")
        return record
