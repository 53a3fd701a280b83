"""Field rules for tags, people and the fields every note shares.

Note-type specific rules live with their registration in
``mylife.core.services.note_types``.
"""
from __future__ import annotations

from typing import Any

from mylife.core.validation.rules import FieldRule, body


def _type_not_in_tags(tags: Any, payload: Any) -> bool:
    if not isinstance(tags, list):
        return True
    return payload.get("type") not in tags


def _flag(path: str, label: str) -> FieldRule:
    return body(path).trim().is_boolean(f"{label} is required and it must be either true or false.")


TAG_RULES: tuple[FieldRule, ...] = (
    body("name")
    .trim()
    .length(1, 25, "A tag name is required; it must be between 1 and 25 characters long."),
    body("description").exists("Description is required but it can be an empty string.").trim(),
    _flag("isType", "IsType"),
    _flag("isTag", "IsTag"),
    _flag("isWorkout", "IsWorkout"),
    _flag("isPerson", "IsPerson"),
)


PERSON_RULES: tuple[FieldRule, ...] = (
    body("firstName", "First name is required and must be less than 25 characters long.")
    .trim()
    .length(1, 25),
    body("middleName", "Middle is required but it can be an empty string.").exists().trim().length(0, 25),
    body("lastName", "Last name is required and must be less than 25 characters long.").trim().length(0, 25),
    body("preferredName", "Preferred name is required but it can be an empty string.")
    .exists()
    .trim()
    .length(0, 25),
    body("birthdate", "Birthdate must be a valid date.").optional().trim().is_date(),
    body("googlePhotoUrl", "A Google Photo URL is required but it can be an empty string.")
    .exists()
    .trim()
    .length(0, 250),
    body("picasaContactId", "A Picasa Contact ID is required; it can be an empty string or a 16-character ID.")
    .exists()
    .trim()
    .length(0, 16),
    body("tags")
    .is_list("Tags must be specified in an array; an empty array is okay.")
    .no_duplicates("Duplicate tags are not allowed."),
    body("notes").optional().is_list("Notes must be specified in an array; an empty array is okay."),
    body("notes.*.date", "A note date must be a valid date.").optional().trim().is_date(),
    body("notes.*.note", "A note is required.").exists().trim().length(1),
    # Entries are compared once their fields have been trimmed.
    body("notes").optional().no_duplicates("Duplicate notes are not allowed."),
    body("photos").optional().is_list("Photos must be specified in an array; an empty array is okay."),
    body("photos.*.image", "An image must be specified.").not_empty(),
    body("photos.*.description").optional().trim(),
    body("photos").optional().no_duplicates("Duplicate photos are not allowed."),
)


NOTE_RULES: tuple[FieldRule, ...] = (
    body("type").trim().length(1, message="Type is required."),
    body("tags")
    .is_list("Tags must be specified in an array; an empty array is okay.")
    .no_duplicates("Duplicate tags are not allowed.")
    .check(_type_not_in_tags, "The same tag cannot be specified in both the type and tags fields."),
    body("date").trim().is_date("Date must be a valid date."),
    body("title").trim().length(1, 200, "A title between 1 and 200 characters long is required."),
    body("description").trim(),
    body("people")
    .is_list("People must be specified in an array.")
    .no_duplicates("Duplicate names are not allowed."),
    body("place").exists("Place is required but it can be an empty string.").trim(),
    body("photoAlbum").optional().trim(),
)
