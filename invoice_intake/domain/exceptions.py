"""Domain-specific exceptions — framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class InvalidStatusTransitionError(Exception):
    """Raised when a lifecycle transition would move a record backwards."""

    def __init__(self, entity_id: str, current: str, requested: str):
        self.entity_id = entity_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"Invoice '{entity_id}' cannot move from {current} to {requested}"
        )


class InvalidQueryError(ValueError):
    """Raised when list query parameters cannot be satisfied."""
