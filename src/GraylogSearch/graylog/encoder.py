"""Graylog search parameter encoder.

Turns a `SearchRequestSpec` into the URL query parameters of the
absolute-time universal search endpoints, validating caller input first.

Parameters per endpoint
- every endpoint: query, from, to, filter (``streams:<id>``)
- messages:        limit, offset, sort, fields (all optional)
- stats:           field
- histogram:       interval
- fieldhistogram:  field, interval, cardinality
- terms:           field, size, order, top_values_only, stacked_fields
"""

from __future__ import annotations

from urllib.parse import quote, urlencode

from GraylogSearch.core.errors import ValidationError
from GraylogSearch.core.models import (
    SearchEndpoint,
    SearchRequestSpec,
    TimeUnit,
    format_timestamp,
)

MATCH_ALL = "*"
_ALLOWED_ORDERS = {"asc", "desc"}


def encode_params(spec: SearchRequestSpec) -> dict[str, str]:
    """Validate a request and encode its URL query parameters.

    Args:
        spec: Request to encode.

    Returns:
        Parameter mapping in a stable order.

    Raises:
        ValidationError: If a required parameter is missing or out of range.
    """
    stream_id = (spec.stream_id or "").strip()
    if not stream_id:
        raise ValidationError("Stream id must not be empty")

    params = {
        "query": spec.query.strip() or MATCH_ALL,
        "from": format_timestamp(spec.time_range.from_),
        "to": format_timestamp(spec.time_range.to),
        "filter": f"streams:{stream_id}",
    }

    endpoint = spec.endpoint
    if endpoint is SearchEndpoint.MESSAGES:
        params.update(_message_params(spec))
    elif endpoint is SearchEndpoint.STATISTICS:
        params["field"] = _require_field(spec)
    elif endpoint is SearchEndpoint.HISTOGRAM:
        params["interval"] = _require_interval(spec)
    elif endpoint is SearchEndpoint.FIELD_HISTOGRAM:
        params["field"] = _require_field(spec)
        params["interval"] = _require_interval(spec)
        params["cardinality"] = _flag(spec.cardinality)
    elif endpoint is SearchEndpoint.TERMS:
        params.update(_terms_params(spec))
    else:
        raise ValidationError(f"Unsupported endpoint: {endpoint}")
    return params


def build_url(base_url: str, spec: SearchRequestSpec) -> str:
    """Return the full request URL for a search request."""
    params = encode_params(spec)
    return f"{base_url.rstrip('/')}{spec.endpoint.path}?{urlencode(params, quote_via=quote)}"


def _message_params(spec: SearchRequestSpec) -> dict[str, str]:
    params: dict[str, str] = {}
    if spec.limit is not None:
        params["limit"] = str(_positive(spec.limit, "limit"))
    if spec.offset is not None:
        if spec.offset < 0:
            raise ValidationError(f"offset must not be negative, got {spec.offset}")
        params["offset"] = str(spec.offset)
    if spec.sort:
        params["sort"] = spec.sort
    fields = [name.strip() for name in spec.fields if name.strip()]
    if fields:
        params["fields"] = ",".join(fields)
    return params


def _terms_params(spec: SearchRequestSpec) -> dict[str, str]:
    if spec.size is None:
        raise ValidationError("Terms search requires a size")
    order = (spec.order or "").strip().lower()
    if order not in _ALLOWED_ORDERS:
        raise ValidationError(f"order must be one of {sorted(_ALLOWED_ORDERS)}, got {spec.order!r}")

    params = {
        "field": _require_field(spec),
        "size": str(_positive(spec.size, "size")),
        "order": order,
        "top_values_only": _flag(spec.top_values_only),
    }
    if spec.stacked_fields.strip():
        params["stacked_fields"] = spec.stacked_fields.strip()
    return params


def _require_field(spec: SearchRequestSpec) -> str:
    field = (spec.field or "").strip()
    if not field:
        raise ValidationError(f"{spec.endpoint.name.lower()} search requires a field")
    return field


def _require_interval(spec: SearchRequestSpec) -> str:
    if spec.interval is None:
        raise ValidationError(f"{spec.endpoint.name.lower()} search requires an interval")
    return TimeUnit.coerce(spec.interval).value


def _positive(value: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{name} must be a positive integer, got {value!r}")
    return value


def _flag(value: bool) -> str:
    return "true" if value else "false"
