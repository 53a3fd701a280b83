from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, status

from mylife.api.v1.schemas.envelope import ok_response
from mylife.core.services.person_service import PersonService
from mylife.dependencies import get_person_service

router = APIRouter()


@router.get("")
async def list_people(service: PersonService = Depends(get_person_service)):
    people = await service.list_people()
    return ok_response([p.to_wire() for p in people])


@router.get("/count")
async def count_people(service: PersonService = Depends(get_person_service)):
    return ok_response(await service.count_people())


@router.get("/{person_id}")
async def get_person(person_id: str, service: PersonService = Depends(get_person_service)):
    person = await service.get_person(person_id)
    return ok_response(person.to_wire())


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_person(
    payload: dict[str, Any] = Body(...),
    service: PersonService = Depends(get_person_service),
):
    person = await service.create_person(payload)
    return ok_response(person.to_wire(), status.HTTP_201_CREATED)


@router.put("/{person_id}")
async def update_person(
    person_id: str,
    payload: dict[str, Any] = Body(...),
    service: PersonService = Depends(get_person_service),
):
    person = await service.update_person(person_id, payload)
    return ok_response(person.to_wire())


@router.delete("/{person_id}")
async def delete_person(person_id: str, service: PersonService = Depends(get_person_service)):
    person = await service.delete_person(person_id)
    return ok_response(person.to_wire())
