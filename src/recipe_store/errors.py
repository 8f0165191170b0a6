"""
Custom error types and exit codes for Recipe Store.
"""

import logging
import sys
from typing import NoReturn, Optional

logger = logging.getLogger(__name__)


class RecipeStoreError(Exception):
    """Base exception for Recipe Store errors."""

    exit_code = 1

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigurationError(RecipeStoreError):
    """Configuration or path-related errors."""

    exit_code = 2


class TemplateError(RecipeStoreError):
    """Template rendering errors."""

    exit_code = 3


class RecipeLoadError(RecipeStoreError):
    """
    A recipe document was rejected.

    Raised by the reader for any structural or semantic problem. Nothing
    from the rejected document is ever returned alongside it.
    """

    exit_code = 5

    @property
    def json_path(self) -> str:
        return "$"

    def with_source(self, source: str) -> "RecipeLoadError":
        """Return the same error with ``source`` prefixed to its message."""
        self.message = f"{source}: {self.message}"
        self.args = (self.message,)
        return self


class StructuralError(RecipeLoadError):
    """The text is not a document of the expected shape."""

    def __init__(
        self,
        message: str,
        index: Optional[int] = None,
        position: Optional[int] = None,
        path: Optional[str] = None,
    ):
        self.index = index
        self.position = position
        self.path = path
        if position is not None:
            message = f"{message} (at offset {position})"
        super().__init__(message)

    @property
    def json_path(self) -> str:
        return self.path or "$"


class RecipeValidationError(RecipeLoadError):
    """A well-shaped value breaks a recipe or ingredient constraint."""

    def __init__(
        self,
        message: str,
        recipe_index: int,
        ingredient_index: Optional[int] = None,
        field: Optional[str] = None,
    ):
        self.recipe_index = recipe_index
        self.ingredient_index = ingredient_index
        self.field = field
        if ingredient_index is not None:
            message = f"ingredient [{ingredient_index}]: {message}"
        super().__init__(f"Recipe [{recipe_index}]: {message}")

    @property
    def json_path(self) -> str:
        path = f"$.recipes[{self.recipe_index}]"
        if self.ingredient_index is not None:
            path += f".ingredients[{self.ingredient_index}]"
        if self.field:
            path += f".{self.field}"
        return path


class StorageError(RecipeStoreError):
    """Reading or writing a recipes file failed."""

    exit_code = 6


# Exit codes
EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_TEMPLATE_ERROR = 3
EXIT_VALIDATION_ERROR = 5
EXIT_STORAGE_ERROR = 6


def fatal_error(message: str, exit_code: int = EXIT_ERROR) -> NoReturn:
    """Log an error message and exit with the given code."""
    logger.error(message)
    sys.exit(exit_code)
