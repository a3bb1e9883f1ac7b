"""Book API endpoints."""

from typing import Annotated, List, NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ....modules.book.schemas import BookAssign, BookCreate, BookRead, BookUpdate
from ....modules.book.services import BookService
from ....modules.common.utils.error_handler import handle_exception
from ..dependencies import DbSession, get_book_service

router = APIRouter(prefix="/books", tags=["Books"])


def _raise_http(error: Exception) -> NoReturn:
    http_exc = handle_exception(error)
    if http_exc:
        raise http_exc
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")


@router.get(
    "",
    summary="List Books",
    description="""
    Retrieves books, either all of them or one page.

    - **page**: Page number, starting at 0
    - **books_per_page**: Number of books per page
    - **sort_by_year**: Order by year of publication, then name

    Without `page` and `books_per_page` every book is returned. A missing
    parameter counts as 0, and `page=0&books_per_page=0` also returns every book.
    """,
    responses={
        200: {"description": "List of books"},
        422: {"description": "Invalid paging parameters"},
    },
)
async def list_books(
    db: DbSession,
    page: Annotated[Optional[int], Query(description="Page number (0-indexed)")] = None,
    books_per_page: Annotated[Optional[int], Query(description="Books per page")] = None,
    sort_by_year: Annotated[bool, Query(description="Sort by year of publication and name")] = False,
    book_service: BookService = Depends(get_book_service),
) -> List[BookRead]:
    """List books, optionally paged and sorted."""
    try:
        if page is None and books_per_page is None:
            return await book_service.get_books(db, sort_by_year=sort_by_year)
        return await book_service.get_books_page(db, page or 0, books_per_page or 0, sort_by_year=sort_by_year)
    except Exception as e:
        _raise_http(e)


@router.get(
    "/search",
    summary="Search Books by Name",
    description="""
    Finds books whose name starts with the search term.

    - **searchTerm**: Leading part of the book name. An empty term is rejected with 404.
    """,
    responses={
        200: {"description": "Books whose name starts with the term"},
        404: {"description": "Empty search term"},
    },
)
async def search_books(
    db: DbSession,
    search_term: Annotated[str, Query(alias="searchTerm", description="Book name prefix")] = "",
    book_service: BookService = Depends(get_book_service),
) -> List[BookRead]:
    """Search books by name prefix."""
    try:
        return await book_service.search_books(search_term, db)
    except Exception as e:
        _raise_http(e)


@router.post(
    "/search",
    summary="Search Books by Name (form submit)",
    description="Same as `GET /books/search`, for clients that submit the search with POST.",
    responses={
        200: {"description": "Books whose name starts with the term"},
        404: {"description": "Empty search term"},
    },
)
async def make_search(
    db: DbSession,
    search_term: Annotated[str, Query(alias="searchTerm", description="Book name prefix")] = "",
    book_service: BookService = Depends(get_book_service),
) -> List[BookRead]:
    """Search books by name prefix."""
    try:
        return await book_service.search_books(search_term, db)
    except Exception as e:
        _raise_http(e)


@router.get(
    "/{book_id}",
    summary="Get Book Details",
    description="Retrieves a book by ID, including who holds it and since when.",
    responses={
        200: {"description": "Book details"},
        404: {"description": "Book not found"},
    },
)
async def get_book(
    book_id: int,
    db: DbSession,
    book_service: BookService = Depends(get_book_service),
) -> BookRead:
    """Get a specific book by ID."""
    try:
        return await book_service.get_book(book_id, db)
    except Exception as e:
        _raise_http(e)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create New Book",
    description="""
    Adds a new book to the shelf.

    - **name**: Title of the book
    - **author**: Author of the book
    - **year_of_publication**: Year the book was published
    """,
    responses={
        201: {"description": "Book created successfully"},
        422: {"description": "Invalid book data"},
    },
    response_description="The created book",
)
async def create_book(
    book_data: BookCreate,
    db: DbSession,
    book_service: BookService = Depends(get_book_service),
) -> BookRead:
    """Create a new book."""
    try:
        book_id = await book_service.create_book(book_data, db)
        return await book_service.get_book(book_id, db)
    except Exception as e:
        _raise_http(e)


@router.patch(
    "/{book_id}",
    summary="Update Book",
    description="""
    Replaces a book's name, author and year of publication.

    Lending state is not affected: a lent book stays with its holder.
    """,
    responses={
        200: {"description": "Book updated successfully"},
        404: {"description": "Book not found"},
        422: {"description": "Invalid book data"},
    },
)
async def update_book(
    book_id: int,
    update_data: BookUpdate,
    db: DbSession,
    book_service: BookService = Depends(get_book_service),
) -> BookRead:
    """Update a book."""
    try:
        return await book_service.update_book(book_id, update_data, db)
    except Exception as e:
        _raise_http(e)


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Book",
    responses={
        204: {"description": "Book deleted successfully"},
        404: {"description": "Book not found"},
    },
)
async def delete_book(
    book_id: int,
    db: DbSession,
    book_service: BookService = Depends(get_book_service),
) -> None:
    """Delete a book."""
    try:
        await book_service.delete_book(book_id, db)
    except Exception as e:
        _raise_http(e)


@router.patch(
    "/{book_id}/add",
    summary="Lend Book",
    description="""
    Lends a book to a person and records when it was taken.

    - **person_id**: ID of the person taking the book

    A book that is already lent has to be returned first.
    """,
    responses={
        200: {"description": "Book lent"},
        404: {"description": "Book or person not found"},
        409: {"description": "Book is already lent"},
    },
)
async def assign_book(
    book_id: int,
    assignment: BookAssign,
    db: DbSession,
    book_service: BookService = Depends(get_book_service),
) -> BookRead:
    """Assign a book to a person."""
    try:
        return await book_service.assign_book(book_id, assignment.person_id, db)
    except Exception as e:
        _raise_http(e)


@router.get(
    "/{book_id}/return",
    summary="Return Book",
    description="Puts a book back on the shelf. Returning a book that is not lent is a no-op.",
    responses={
        200: {"description": "Book returned"},
        404: {"description": "Book not found"},
    },
)
async def return_book(
    book_id: int,
    db: DbSession,
    book_service: BookService = Depends(get_book_service),
) -> BookRead:
    """Return a book."""
    try:
        return await book_service.return_book(book_id, db)
    except Exception as e:
        _raise_http(e)
