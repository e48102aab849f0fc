"""JSON-Patch (RFC 6902) support for partial user updates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import jsonpatch
import jsonpointer

from webapi.users.validation import FieldError, ValidationResult, validate_user_to_update

if TYPE_CHECKING:
    from webapi.users.types import UserToUpdateDto

PATCH_FIELD = "patch"


class MalformedPatchError(ValueError):
    """The request body is not a JSON-Patch document at all."""


def parse_patch(body: Any) -> list[dict[str, Any]]:  # noqa: ANN401
    """Accept only a JSON array of operation objects.

    Individual operations are checked when the patch is applied, so an
    unknown ``op`` is a validation error rather than a malformed request.
    """
    if not isinstance(body, list) or not all(isinstance(op, dict) for op in body):
        raise MalformedPatchError("JSON-Patch body must be an array of operation objects")
    return body


def apply_patch(operations: list[dict[str, Any]], target: UserToUpdateDto) -> ValidationResult[UserToUpdateDto]:
    """Apply the operations to a DTO projection and re-validate the result.

    The input DTO is left untouched. Failing operations and fields the
    projection does not have are reported as field errors.
    """
    document = target.model_dump(by_alias=True)
    try:
        patched = jsonpatch.JsonPatch(operations).apply(document)
    except (jsonpatch.JsonPatchException, jsonpointer.JsonPointerException, TypeError) as e:
        return ValidationResult(errors=[FieldError(PATCH_FIELD, str(e))])

    if not isinstance(patched, dict):
        return ValidationResult(errors=[FieldError(PATCH_FIELD, "Patch must keep the document an object")])

    unknown = sorted(set(patched) - set(document))
    if unknown:
        return ValidationResult(errors=[FieldError(key, "Unknown field") for key in unknown])

    return validate_user_to_update(patched)
