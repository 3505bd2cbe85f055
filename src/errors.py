class CombinationError(Exception):
    """Base class for combination listing and update failures.

    Carries a human-readable ``message`` and an integer ``code`` that ends up
    in fallback error messages.
    """

    code: int = 0

    def __init__(self, message: str, code: int | None = None) -> None:
        self.message = message
        if code is not None:
            self.code = code
        super().__init__(message)

    def __str__(self) -> str:
        return f"{type(self).__name__}: {self.message}"


class InvalidListQueryError(CombinationError):
    """Pagination, sort or filter parameters rejected before querying.

    Maps to HTTP 400.
    """


class CombinationNotFoundError(CombinationError):
    """No combination exists for the requested id.

    Maps to HTTP 404.
    """

    def __init__(self, combination_id: int) -> None:
        self.combination_id = combination_id
        super().__init__(f"Combination {combination_id} not found")


class CombinationUpdateError(CombinationError):
    """The update could not be applied to the stored combination.

    Reported to the client as a fallback message with HTTP 500.
    """

    FAILED_TO_UPDATE = 1
