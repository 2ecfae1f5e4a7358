"""Record read routes.

Resolves the requested record through `SingleRecordResolver` and returns
it together with its caching metadata in the body. Errors raised during
resolution are rendered by the problem+json handlers.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Header, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from records_api.logic.authorization import can_view
from records_api.logic.etag_generator import EtagGenerator
from records_api.logic.repository_records import load_record
from records_api.logic.single_record import SingleRecordResolver

router = APIRouter()
logger = logging.getLogger(__name__)


def build_resolver(request: Request, record_id: str, user_id: Optional[str]) -> SingleRecordResolver:
    config = request.app.state.config
    store = request.app.state.records_store
    generator = EtagGenerator.from_config(config)
    return SingleRecordResolver(
        lambda: load_record(record_id, store, generator, config.records.updated_at_field),
        lambda record: can_view(record, user_id),
    )


@router.get("/records/{record_id}", summary="Get a single record")
async def get_single_record(
    record_id: str,
    request: Request,
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
):
    resolver = build_resolver(request, record_id, x_user_id)
    record = await resolver.resolve_and_prepare_async()

    strong = resolver.get_strong_etag()
    weak = resolver.get_weak_etag()
    last_modified = resolver.get_last_modified()
    body = {
        "record": jsonable_encoder(record.to_dict()),
        "etag": str(strong) if strong is not None else None,
        "weak_etag": str(weak) if weak is not None else None,
        "last_modified": last_modified.isoformat() if last_modified is not None else None,
    }
    logger.info("records.get", extra={"record_id": record_id, "has_etag": strong is not None})
    return JSONResponse(body, status_code=200)


__all__ = ["router", "build_resolver", "get_single_record"]
