"""People API endpoints."""

from typing import Annotated, List, NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ....modules.common.utils.error_handler import handle_exception
from ....modules.person.schemas import PersonCreate, PersonRead, PersonUpdate, PersonWithBooksRead
from ....modules.person.services import PeopleService
from ..dependencies import DbSession, get_people_service

router = APIRouter(prefix="/people", tags=["People"])


def _raise_http(error: Exception) -> NoReturn:
    http_exc = handle_exception(error)
    if http_exc:
        raise http_exc
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")


@router.get(
    "",
    summary="List People",
    description="""
    Retrieves every registered person, ordered by ID.

    - **name**: Only return people with exactly this name
    """,
    responses={
        200: {"description": "List of people"},
    },
)
async def list_people(
    db: DbSession,
    name: Annotated[Optional[str], Query(description="Exact name to filter by")] = None,
    people_service: PeopleService = Depends(get_people_service),
) -> List[PersonRead]:
    """List people, optionally filtered by name."""
    try:
        if name is not None:
            return await people_service.find_by_name(name, db)
        return await people_service.get_people(db)
    except Exception as e:
        _raise_http(e)


@router.get(
    "/{person_id}",
    summary="Get Person Details",
    description="Retrieves a person by ID together with the books they currently hold.",
    responses={
        200: {"description": "Person details with their books"},
        404: {"description": "Person not found"},
    },
)
async def get_person(
    person_id: int,
    db: DbSession,
    people_service: PeopleService = Depends(get_people_service),
) -> PersonWithBooksRead:
    """Get a specific person by ID."""
    try:
        return await people_service.get_person_with_books(person_id, db)
    except Exception as e:
        _raise_http(e)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Register Person",
    description="""
    Registers a new person who can borrow books.

    - **name**: Full name of the person
    """,
    responses={
        201: {"description": "Person registered successfully"},
        422: {"description": "Invalid person data"},
    },
    response_description="The registered person",
)
async def create_person(
    person_data: PersonCreate,
    db: DbSession,
    people_service: PeopleService = Depends(get_people_service),
) -> PersonRead:
    """Register a new person."""
    try:
        person_id = await people_service.create_person(person_data, db)
        return await people_service.get_person(person_id, db)
    except Exception as e:
        _raise_http(e)


@router.patch(
    "/{person_id}",
    summary="Update Person",
    description="Replaces a person's data. Unknown IDs are rejected, never created.",
    responses={
        200: {"description": "Person updated successfully"},
        404: {"description": "Person not found"},
        422: {"description": "Invalid person data"},
    },
)
async def update_person(
    person_id: int,
    update_data: PersonUpdate,
    db: DbSession,
    people_service: PeopleService = Depends(get_people_service),
) -> PersonRead:
    """Update a person."""
    try:
        return await people_service.update_person(person_id, update_data, db)
    except Exception as e:
        _raise_http(e)


@router.delete(
    "/{person_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Person",
    description="Deletes a person. Any books they hold go back on the shelf.",
    responses={
        204: {"description": "Person deleted successfully"},
        404: {"description": "Person not found"},
    },
)
async def delete_person(
    person_id: int,
    db: DbSession,
    people_service: PeopleService = Depends(get_people_service),
) -> None:
    """Delete a person."""
    try:
        await people_service.delete_person(person_id, db)
    except Exception as e:
        _raise_http(e)
