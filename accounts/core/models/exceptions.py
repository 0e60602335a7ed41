from typing import Any


class ModelNotFoundError(Exception):
    """Raised when a lookup that must succeed finds no matching row."""

    def __init__(self, model: str, identifier: Any):
        self.model = model
        self.identifier = identifier
        self.message = f"{model} with id '{identifier}' not found."
        super().__init__(self.message)
