"""Functional tests for SingleRecordResolver.

Covers the lookup -> authorize -> hook sequence, error propagation, ETag
capability dispatch and the last-modified accessor. Collaborators are
pytest-mock doubles so call order and call absence can be asserted.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import pytest

from records_api.errors import (
    AuthorizationError,
    EtagGenerationError,
    NotFoundError,
    RecordNotResolvedError,
)
from records_api.logic.etag_generator import EtagGenerator
from records_api.logic.single_record import SingleRecordResolver
from records_api.models.etag import ETag
from records_api.models.record import (
    NO_ETAG,
    GeneratableEtag,
    PrecomputedEtag,
    Record,
    etag_capability_for,
)


def _record(**kwargs) -> Record:
    fields = kwargs.pop("fields", {"title": "alpha"})
    return Record(key="r-1", fields=fields, **kwargs)


# ----------------------------------------------------------------------------
# Resolution sequence
# ----------------------------------------------------------------------------


def test_resolve_stores_record_returned_by_lookup(mocker):
    """Authorized lookups complete and keep the looked-up record."""
    # Arrange
    record = _record()
    find = mocker.Mock(return_value=record)
    authorize = mocker.Mock(return_value=True)
    hook = mocker.Mock()
    resolver = SingleRecordResolver(find, authorize, on_record_found=hook)
    # Act
    returned = resolver.resolve_and_prepare()
    # Assert
    assert returned is record
    assert resolver.record is record
    assert resolver.resolved is True
    authorize.assert_called_once_with(record)
    hook.assert_called_once_with(record)


def test_collaborators_run_in_order(mocker):
    """Lookup, authorization and hook run strictly one after another."""
    # Arrange
    calls: list[str] = []
    record = _record()
    resolver = SingleRecordResolver(
        lambda: calls.append("find") or record,
        lambda r: calls.append("authorize") or True,
        on_record_found=lambda r: calls.append("hook"),
    )
    # Act
    resolver.resolve_and_prepare()
    # Assert
    assert calls == ["find", "authorize", "hook"]


def test_denied_authorization_raises_and_skips_hook(mocker):
    """A false authorization raises AuthorizationError; the hook never runs."""
    # Arrange
    hook = mocker.Mock()
    resolver = SingleRecordResolver(lambda: _record(), lambda r: False, on_record_found=hook)
    # Act / Assert
    with pytest.raises(AuthorizationError):
        resolver.resolve_and_prepare()
    hook.assert_not_called()


def test_custom_failed_authorization_collaborator_is_used(mocker):
    """The failure signal is delegated to the injected collaborator."""
    # Arrange
    class Forbidden(Exception):
        pass

    def _abort(record):
        raise Forbidden(record.key)

    hook = mocker.Mock()
    resolver = SingleRecordResolver(
        lambda: _record(),
        lambda r: False,
        on_record_found=hook,
        failed_authorization=_abort,
    )
    # Act / Assert
    with pytest.raises(Forbidden):
        resolver.resolve_and_prepare()
    hook.assert_not_called()


def test_failed_authorization_that_returns_still_skips_hook(mocker):
    """A non-raising failure collaborator ends the flow without the hook."""
    # Arrange
    failed = mocker.Mock(return_value=None)
    hook = mocker.Mock()
    resolver = SingleRecordResolver(lambda: _record(), lambda r: False, on_record_found=hook, failed_authorization=failed)
    # Act
    resolver.resolve_and_prepare()
    # Assert
    failed.assert_called_once()
    hook.assert_not_called()


def test_lookup_failure_propagates_and_skips_authorization(mocker):
    """NotFoundError from the lookup propagates unchanged."""
    # Arrange
    missing = NotFoundError("r-404")
    find = mocker.Mock(side_effect=missing)
    authorize = mocker.Mock(return_value=True)
    resolver = SingleRecordResolver(find, authorize)
    # Act
    with pytest.raises(NotFoundError) as excinfo:
        resolver.resolve_and_prepare()
    # Assert
    assert excinfo.value is missing
    authorize.assert_not_called()
    assert resolver.resolved is False


def test_lookup_returning_none_is_not_found(mocker):
    """A lookup that finds nothing is reported as not found."""
    # Arrange
    authorize = mocker.Mock(return_value=True)
    resolver = SingleRecordResolver(lambda: None, authorize)
    # Act
    with pytest.raises(NotFoundError):
        resolver.resolve_and_prepare()
    # Assert
    authorize.assert_not_called()
    assert resolver.resolved is False


def test_authorization_exception_propagates_and_skips_hook(mocker):
    """Exceptions raised by the authorization callable are not swallowed."""
    # Arrange
    hook = mocker.Mock()
    authorize = mocker.Mock(side_effect=LookupError("policy store offline"))
    resolver = SingleRecordResolver(lambda: _record(), authorize, on_record_found=hook)
    # Act / Assert
    with pytest.raises(LookupError):
        resolver.resolve_and_prepare()
    hook.assert_not_called()


def test_hook_errors_propagate(mocker):
    """Post-found validation failures surface to the caller."""
    resolver = SingleRecordResolver(
        lambda: _record(),
        lambda r: True,
        on_record_found=mocker.Mock(side_effect=ValueError("archived")),
    )
    with pytest.raises(ValueError, match="archived"):
        resolver.resolve_and_prepare()


def test_subclass_overrides_replace_injected_collaborators():
    """Collaborators can be provided by overriding methods."""

    class ArchivedCheck(SingleRecordResolver):
        def find_record_or_fail(self):
            return _record(fields={"archived": True})

        def authorize_found_record(self, record):
            return True

        def on_record_found(self, record):
            if record.get_field("archived"):
                raise ValueError("record is archived")

    with pytest.raises(ValueError, match="archived"):
        ArchivedCheck().resolve_and_prepare()


def test_missing_collaborators_are_reported():
    with pytest.raises(NotImplementedError):
        SingleRecordResolver().resolve_and_prepare()


def test_record_is_set_once_per_resolver():
    resolver = SingleRecordResolver(lambda: _record(), lambda r: True)
    resolver.resolve_and_prepare()
    with pytest.raises(RuntimeError):
        resolver.resolve_and_prepare()


def test_accessors_before_resolution_are_usage_errors():
    resolver = SingleRecordResolver(lambda: _record(), lambda r: True)
    with pytest.raises(RecordNotResolvedError):
        _ = resolver.record
    with pytest.raises(RecordNotResolvedError):
        resolver.get_etag()
    with pytest.raises(RecordNotResolvedError):
        resolver.get_last_modified()


def test_async_resolution_awaits_collaborators(mocker):
    """Awaitable collaborators are awaited in the same order."""
    # Arrange
    calls: list[str] = []
    record = _record()

    async def find():
        calls.append("find")
        return record

    async def authorize(r):
        calls.append("authorize")
        return True

    def hook(r):
        calls.append("hook")

    resolver = SingleRecordResolver(find, authorize, on_record_found=hook)
    # Act
    returned = asyncio.run(resolver.resolve_and_prepare_async())
    # Assert
    assert returned is record
    assert calls == ["find", "authorize", "hook"]


def test_async_denied_authorization_raises(mocker):
    async def authorize(r):
        return False

    hook = mocker.Mock()
    resolver = SingleRecordResolver(lambda: _record(), authorize, on_record_found=hook)
    with pytest.raises(AuthorizationError):
        asyncio.run(resolver.resolve_and_prepare_async())
    hook.assert_not_called()


def test_async_lookup_failure_skips_authorization(mocker):
    """NotFoundError from an async lookup propagates before authorization."""
    # Arrange
    missing = NotFoundError("r-404")

    async def find():
        raise missing

    authorize = mocker.Mock(return_value=True)
    resolver = SingleRecordResolver(find, authorize)
    # Act
    with pytest.raises(NotFoundError) as excinfo:
        asyncio.run(resolver.resolve_and_prepare_async())
    # Assert
    assert excinfo.value is missing
    authorize.assert_not_called()
    assert resolver.resolved is False


# ----------------------------------------------------------------------------
# ETag dispatch
# ----------------------------------------------------------------------------


def _resolved(record: Record) -> SingleRecordResolver:
    resolver = SingleRecordResolver(lambda: record, lambda r: True)
    resolver.resolve_and_prepare()
    return resolver


def test_precomputed_etags_are_returned(mocker):
    """Precomputed tags are returned as-is for strong and weak access."""
    # Arrange
    strong = ETag("v42")
    weak = ETag("v42-w", weak=True)
    resolver = _resolved(_record(etag_capability=PrecomputedEtag(strong, weak)))
    # Act / Assert
    assert resolver.get_strong_etag() == strong
    assert resolver.get_weak_etag() == weak
    assert resolver.get_etag() == strong


def test_precomputed_weak_defaults_to_weak_form_of_strong():
    resolver = _resolved(_record(etag_capability=PrecomputedEtag(ETag("v42"))))
    assert resolver.get_weak_etag() == ETag("v42", weak=True)


def test_precomputed_wins_over_generator(mocker, etag_generator):
    """When both are offered, the precomputed tag takes priority."""
    # Arrange
    make_strong = mocker.spy(etag_generator, "make_strong")
    capability = etag_capability_for(ETag("stored"), generator=etag_generator, content=lambda: "content")
    resolver = _resolved(_record(etag_capability=capability))
    # Act
    strong = resolver.get_strong_etag()
    weak = resolver.get_weak_etag()
    # Assert
    assert isinstance(capability, PrecomputedEtag)
    assert strong == ETag("stored")
    assert weak == ETag("stored", weak=True)
    make_strong.assert_not_called()


def test_generated_etags_use_generator(etag_generator):
    """Generatable records produce strong and weak tags on demand."""
    # Arrange
    capability = etag_capability_for(generator=etag_generator, content=lambda: ("r-1", 3))
    resolver = _resolved(_record(etag_capability=capability))
    # Act
    strong = resolver.get_strong_etag()
    weak = resolver.get_weak_etag()
    # Assert
    assert isinstance(capability, GeneratableEtag)
    assert strong is not None and strong.strong
    assert weak is not None and weak.weak
    assert strong.value == weak.value == etag_generator.make_strong(("r-1", 3)).value


def test_no_capability_yields_no_etag():
    resolver = _resolved(_record(etag_capability=NO_ETAG))
    assert resolver.get_strong_etag() is None
    assert resolver.get_weak_etag() is None
    assert resolver.get_etag() is None


def test_generation_errors_propagate_from_accessors():
    """Generator failures surface unchanged from both accessors."""
    # Arrange
    capability = etag_capability_for(generator=EtagGenerator("not-a-hash"), content=lambda: "x")
    resolver = _resolved(_record(etag_capability=capability))
    # Act / Assert
    with pytest.raises(EtagGenerationError):
        resolver.get_strong_etag()
    with pytest.raises(EtagGenerationError):
        resolver.get_weak_etag()


# ----------------------------------------------------------------------------
# Last modified
# ----------------------------------------------------------------------------


def test_last_modified_from_iso_string_without_etag():
    """Record with an updated_at string and no ETag capability."""
    # Arrange
    resolver = _resolved(_record(fields={"updated_at": "2024-01-01T00:00:00Z"}))
    # Act / Assert
    assert resolver.get_etag() is None
    assert resolver.get_last_modified() == datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_last_modified_returns_datetime_values_unchanged():
    stamp = datetime(2023, 6, 30, 12, 15, tzinfo=timezone.utc)
    resolver = _resolved(_record(fields={"changed": stamp}, updated_at_field="changed"))
    assert resolver.get_last_modified() == stamp


def test_last_modified_absent_without_declared_field():
    resolver = _resolved(_record(fields={"updated_at": "2024-01-01T00:00:00Z"}, updated_at_field=None))
    assert resolver.get_last_modified() is None


def test_last_modified_absent_when_value_unset():
    resolver = _resolved(_record(fields={"title": "no timestamp"}))
    assert resolver.get_last_modified() is None
    resolver = _resolved(_record(fields={"updated_at": None}))
    assert resolver.get_last_modified() is None


def test_last_modified_invalid_value_reads_as_absent(caplog):
    """Values that are not timestamps give None and log a warning."""
    # Arrange
    resolver = _resolved(_record(fields={"updated_at": "yesterday"}))
    # Act
    with caplog.at_level("WARNING", logger="records_api.logic.single_record"):
        value = resolver.get_last_modified()
    # Assert
    assert value is None
    assert any(r.getMessage() == "record.last_modified.invalid" for r in caplog.records)
