"""Path-addressed patch application for the sourcemap.

A batch is a list of :class:`SourcemapSetRequest`. Each request addresses a
child by a list of names starting at the root:

* every name but the last is walked using the *first* child with that name;
  a missing name fails the whole batch;
* with a ``value``, the first child matching the last name is replaced (or
  the value is appended when there is none);
* without a ``value``, *every* child matching the last name is removed.

Requests apply in order to a copy of the tree, so a failed batch never
touches the caller's tree.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from .errors import AddressError, FormatError, describe_validation_error
from .sourcemap import SourcemapInstance

logger = logging.getLogger(__name__)


class SourcemapSetRequest(BaseModel):
    """One operation of a sourcemap patch batch."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    path: list[str] = Field(default_factory=list)
    value: SourcemapInstance | None = None
    no_overwrite_children: bool = False

    @property
    def is_delete(self) -> bool:
        return self.value is None


_batch_adapter = TypeAdapter(list[SourcemapSetRequest])


def parse_requests(data: Any) -> list[SourcemapSetRequest]:
    """Validate a decoded JSON array into a batch of requests."""
    try:
        return _batch_adapter.validate_python(data)
    except ValidationError as e:
        raise FormatError(f"invalid patch batch ({describe_validation_error(e)})") from e


def apply_request(
    tree: SourcemapInstance, request: SourcemapSetRequest, index: int = 0
) -> SourcemapInstance:
    """Apply one request to ``tree`` in place and return the resulting root.

    The root object changes only when the request has an empty path.
    """
    if not request.path:
        if request.value is None:
            raise AddressError(index, "empty address requires a value")
        return request.value.model_copy(deep=True)

    *parents, target = request.path

    current = tree
    for name in parents:
        child = current.find_first_child(name)
        if child is None:
            raise AddressError(
                index,
                f'"{name}" is not a valid member of {current.describe()}',
                segment=name,
                parent=current.describe(),
            )
        current = child

    if request.value is None:
        before = len(current.children)
        current.children = [child for child in current.children if child.name != target]
        logger.debug(
            "Removed %d child(ren) named %r from %s",
            before - len(current.children),
            target,
            current.describe(),
        )
        return tree

    value = request.value.model_copy(deep=True)
    for position, child in enumerate(current.children):
        if child.name == target:
            if request.no_overwrite_children:
                value.children = child.children
            current.children[position] = value
            break
    else:
        current.children.append(value)
    return tree


def apply_patches(
    tree: SourcemapInstance, requests: list[SourcemapSetRequest]
) -> SourcemapInstance:
    """Apply a batch of requests in order and return the new tree.

    ``tree`` itself is never modified. The first failing request raises
    :class:`AddressError` carrying its index in the batch.
    """
    result = tree.model_copy(deep=True)
    for index, request in enumerate(requests):
        result = apply_request(result, request, index)
    return result
