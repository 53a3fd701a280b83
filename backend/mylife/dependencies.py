from __future__ import annotations

from fastapi import Depends, Request

from mylife.core.repositories.document_store import DocumentStore
from mylife.core.services.duplicates import DuplicateDetector
from mylife.core.services.integrity import ReferentialIntegrityChecker
from mylife.core.services.note_service import NoteService
from mylife.core.services.note_types import NoteTypeRegistry, note_types
from mylife.core.services.person_service import PersonService
from mylife.core.services.tag_service import TagService
from mylife.core.services.taxonomy import TaxonomyGraph
from mylife.core.validation.validator import FieldValidator


def get_store(request: Request) -> DocumentStore:
    """Return the document store opened by the application lifespan."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise RuntimeError("Document store is not initialized")
    return store


def get_note_types() -> NoteTypeRegistry:
    return note_types


def get_field_validator(registry: NoteTypeRegistry = Depends(get_note_types)) -> FieldValidator:
    return FieldValidator(registry)


def get_taxonomy(store: DocumentStore = Depends(get_store)) -> TaxonomyGraph:
    return TaxonomyGraph(store)


def get_duplicate_detector(store: DocumentStore = Depends(get_store)) -> DuplicateDetector:
    return DuplicateDetector(store)


def get_integrity_checker(store: DocumentStore = Depends(get_store)) -> ReferentialIntegrityChecker:
    return ReferentialIntegrityChecker(store)


def get_tag_service(
    store: DocumentStore = Depends(get_store),
    validator: FieldValidator = Depends(get_field_validator),
    duplicates: DuplicateDetector = Depends(get_duplicate_detector),
    integrity: ReferentialIntegrityChecker = Depends(get_integrity_checker),
) -> TagService:
    """Get a request-scoped tag service instance."""
    return TagService(store, validator, duplicates, integrity)


def get_person_service(
    store: DocumentStore = Depends(get_store),
    validator: FieldValidator = Depends(get_field_validator),
    duplicates: DuplicateDetector = Depends(get_duplicate_detector),
    taxonomy: TaxonomyGraph = Depends(get_taxonomy),
    integrity: ReferentialIntegrityChecker = Depends(get_integrity_checker),
) -> PersonService:
    """Get a request-scoped person service instance."""
    return PersonService(store, validator, duplicates, taxonomy, integrity)


def get_note_service(
    store: DocumentStore = Depends(get_store),
    registry: NoteTypeRegistry = Depends(get_note_types),
    validator: FieldValidator = Depends(get_field_validator),
    duplicates: DuplicateDetector = Depends(get_duplicate_detector),
    taxonomy: TaxonomyGraph = Depends(get_taxonomy),
) -> NoteService:
    """Get a request-scoped note service instance."""
    return NoteService(store, registry, validator, duplicates, taxonomy)
