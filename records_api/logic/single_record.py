"""Single record resolution for request handlers.

`SingleRecordResolver` finds the requested record, authorizes access to it
and exposes the caching metadata (strong/weak ETag, last modified date)
derived from it. Lookup, authorization, the authorization failure signal
and the post-found hook are injected collaborators; subclasses may
override the matching methods instead.

Order is fixed: lookup -> authorize -> hook. Resolution errors are never
caught here; an unparseable last-modified value reads as absent.
"""

from __future__ import annotations

import inspect
import logging
from datetime import datetime
from typing import Any, Callable, Optional

from pydantic import TypeAdapter, ValidationError

from records_api.errors import AuthorizationError, NotFoundError, RecordNotResolvedError
from records_api.models.etag import ETag
from records_api.models.record import GeneratableEtag, PrecomputedEtag, ResolvableRecord

logger = logging.getLogger(__name__)

_DATETIME = TypeAdapter(datetime)

# Collaborators may return plain values or awaitables
FindRecord = Callable[[], Any]
AuthorizeRecord = Callable[[ResolvableRecord], Any]
RecordHook = Callable[[ResolvableRecord], Any]


def _deny(record: ResolvableRecord) -> None:
    raise AuthorizationError("not authorized to access the requested record")


def _noop(record: ResolvableRecord) -> None:
    return None


class SingleRecordResolver:
    def __init__(
        self,
        find_record_or_fail: Optional[FindRecord] = None,
        authorize_found_record: Optional[AuthorizeRecord] = None,
        *,
        on_record_found: Optional[RecordHook] = None,
        failed_authorization: Optional[RecordHook] = None,
    ) -> None:
        self._find = find_record_or_fail
        self._authorize = authorize_found_record
        self._on_found = on_record_found or _noop
        self._failed = failed_authorization or _deny
        self._record: Optional[ResolvableRecord] = None

    # Collaborators

    def find_record_or_fail(self) -> Any:
        """Return the requested record or raise NotFoundError."""
        if self._find is None:
            raise NotImplementedError("no record lookup configured")
        return self._find()

    def authorize_found_record(self, record: ResolvableRecord) -> Any:
        """Return True when the caller may see or process `record`."""
        if self._authorize is None:
            raise NotImplementedError("no record authorization configured")
        return self._authorize(record)

    def failed_authorization(self, record: ResolvableRecord) -> Any:
        return self._failed(record)

    def on_record_found(self, record: ResolvableRecord) -> Any:
        """Hook invoked once the record was found and authorized.

        Override or inject to add validation right after lookup.
        """
        return self._on_found(record)

    # Resolution

    @property
    def record(self) -> ResolvableRecord:
        if self._record is None:
            raise RecordNotResolvedError()
        return self._record

    @property
    def resolved(self) -> bool:
        return self._record is not None

    def _assign(self, record: ResolvableRecord) -> None:
        if record is None:
            raise NotFoundError(message="record lookup returned no record")
        if self._record is not None:
            raise RuntimeError("record already resolved for this request")
        self._record = record
        logger.info("record.resolve.found", extra={"record_type": type(record).__name__})

    def _denied(self) -> None:
        logger.info("record.authorize.denied", extra={"record_type": type(self._record).__name__})

    def resolve_and_prepare(self) -> ResolvableRecord:
        """Find, authorize and prepare the requested record.

        Propagates NotFoundError from the lookup and whatever the
        authorization failure collaborator raises.
        """
        self._assign(self.find_record_or_fail())
        record = self.record

        if not self.authorize_found_record(record):
            self._denied()
            self.failed_authorization(record)
            return record

        self.on_record_found(record)
        return record

    async def resolve_and_prepare_async(self) -> ResolvableRecord:
        """Async variant of `resolve_and_prepare`; awaits awaitable collaborators."""
        self._assign(await _settle(self.find_record_or_fail()))
        record = self.record

        if not await _settle(self.authorize_found_record(record)):
            self._denied()
            await _settle(self.failed_authorization(record))
            return record

        await _settle(self.on_record_found(record))
        return record

    # Caching metadata

    def get_etag(self) -> Optional[ETag]:
        return self.get_strong_etag()

    def get_strong_etag(self) -> Optional[ETag]:
        """Return the record's ETag for strong comparison, if any.

        Raises EtagGenerationError when a generator fails.
        """
        capability = self.record.etag_capability
        if isinstance(capability, PrecomputedEtag):
            return capability.strong_etag()
        if isinstance(capability, GeneratableEtag):
            return capability.strong_etag()
        return None

    def get_weak_etag(self) -> Optional[ETag]:
        """Return the record's ETag for weak comparison, if any."""
        capability = self.record.etag_capability
        if isinstance(capability, PrecomputedEtag):
            return capability.weak_etag()
        if isinstance(capability, GeneratableEtag):
            return capability.weak_etag()
        return None

    def get_last_modified(self) -> Optional[datetime]:
        """Return the record's last modified date, if one is available."""
        record = self.record
        column = record.updated_at_field
        if not column:
            return None
        value = record.get_field(column)
        if value is None or value == "":
            return None
        try:
            return _DATETIME.validate_python(value)
        except ValidationError:
            logger.warning(
                "record.last_modified.invalid",
                extra={"field": column, "value_type": type(value).__name__},
            )
            return None


async def _settle(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


__all__ = ["SingleRecordResolver"]
