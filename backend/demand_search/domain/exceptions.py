"""Domain-specific exceptions — framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class QueryValidationError(Exception):
    """Raised when a query cannot be built or run from the given input.

    Always recoverable: the message is meant to be shown to the user as is.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class UnknownFieldError(QueryValidationError):
    """Raised when a UI field or backend token is not registered."""

    def __init__(self, field_name: str, domain: str | None = None):
        self.field_name = field_name
        self.domain = domain
        if domain:
            message = f"Please choose a valid {domain} attribute."
        else:
            message = f"Unknown search field '{field_name}'."
        super().__init__(message)


# Page names as the screens title themselves.
_PAGE_NAMES = {"location": "The Location page"}


class SavedQueryNotApplicableError(QueryValidationError):
    """Raised when a saved query holds no field of the current screen's domain."""

    def __init__(self, domain: str, query: str):
        self.domain = domain
        self.query = query
        page = _PAGE_NAMES.get(domain, f"{domain.capitalize()} page")
        super().__init__(
            f"This saved search does not include {domain} attributes. "
            f"{page} only runs searches with {domain} fields."
        )


class PlanningServiceError(Exception):
    """Raised when a planning backend collaborator fails.

    Covers search, bulk detail, master data and saved-search calls alike.
    ``status_code`` is 0 for transport-level failures.
    """

    def __init__(self, service: str, status_code: int, message: str):
        self.service = service
        self.status_code = status_code
        self.message = message
        super().__init__(f"[{service}] {status_code}: {message}")
