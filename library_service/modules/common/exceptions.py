"""Domain exception classes for business logic errors."""


class DomainError(Exception):
    """Base class for all domain-specific errors."""

    pass


class ResourceNotFoundError(DomainError):
    """Raised when a requested resource cannot be found."""

    pass


class ValidationError(DomainError):
    """Raised when data validation fails."""

    pass


class ConflictError(DomainError):
    """Raised when an operation clashes with the current state of a resource."""

    pass


class BookNotFoundError(ResourceNotFoundError):
    """Raised when a book cannot be found."""

    def __init__(self, book_id: int | None = None, message: str | None = None):
        self.book_id = book_id
        super().__init__(message or f"Book with id {book_id} not found")


class PersonNotFoundError(ResourceNotFoundError):
    """Raised when a person cannot be found."""

    def __init__(self, person_id: int):
        self.person_id = person_id
        super().__init__(f"Person with id {person_id} not found")


class IncorrectParametersError(ValidationError):
    """Raised when paging parameters do not describe a valid page."""

    pass


class BookAlreadyLentError(ConflictError):
    """Raised when assigning a book that is already lent out."""

    def __init__(self, book_id: int, owner_id: int):
        self.book_id = book_id
        self.owner_id = owner_id
        super().__init__(f"Book with id {book_id} is already lent to person with id {owner_id}")
