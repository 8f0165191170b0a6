"""
I/O utilities for Recipe Store.

Provides functions for:
- Saving a recipe book to a JSON file (write-then-replace)
- Loading a recipe book from a JSON file

Parsing and writing of the document text live in ``reader`` and
``writer``; this module only moves that text to and from disk.
"""

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Union

from .errors import ConfigurationError, RecipeLoadError, StorageError
from .models import RecipeBook
from .reader import deserialize
from .writer import serialize

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


def _apply_mode(tmp_name: str, filepath: Path) -> None:
    """Give the temporary file the mode the destination has, or would get."""
    if filepath.exists():
        shutil.copymode(filepath, tmp_name)
        return
    # mkstemp creates 0600; new files get the usual umask-based mode.
    umask = os.umask(0)
    os.umask(umask)
    os.chmod(tmp_name, 0o666 & ~umask)


def save_recipes(book: RecipeBook, filepath: PathLike) -> Path:
    """
    Save a recipe book to a JSON file.

    The document is written to a temporary file next to the destination
    and then moved over it, so an existing file is either fully replaced or
    left as it was.

    Args:
        book: The recipes to save.
        filepath: Destination file. Parent directories are created.

    Returns:
        The destination path.

    Raises:
        TypeError: If ``book`` is not a RecipeBook.
        StorageError: If the file cannot be written.
    """
    if not filepath:
        raise ValueError("File path must not be empty")
    filepath = Path(filepath)

    text = serialize(book)

    try:
        filepath.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=filepath.parent, prefix=f".{filepath.name}.", suffix=".tmp"
        )
    except OSError as e:
        raise StorageError(f"Error writing {filepath.name}: {e}")

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
        _apply_mode(tmp_name, filepath)
        os.replace(tmp_name, filepath)
    except OSError as e:
        Path(tmp_name).unlink(missing_ok=True)
        raise StorageError(f"Error writing {filepath.name}: {e}")

    logger.info(f"Saved {len(book)} recipe(s) to {filepath}")
    return filepath


def load_recipes(filepath: PathLike) -> RecipeBook:
    """
    Load a recipe book from a JSON file.

    Args:
        filepath: Path to the recipes file.

    Returns:
        A new RecipeBook with every recipe from the file.

    Raises:
        ConfigurationError: If the file doesn't exist.
        StorageError: If the file cannot be read or is not UTF-8.
        RecipeLoadError: If the document is malformed or a recipe is invalid.
    """
    if not filepath:
        raise ValueError("File path must not be empty")
    filepath = Path(filepath)

    if not filepath.exists():
        raise ConfigurationError(f"Recipes file not found: {filepath}")

    try:
        text = filepath.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as e:
        raise StorageError(f"{filepath.name} is not valid UTF-8: {e}")
    except OSError as e:
        raise StorageError(f"Error reading {filepath.name}: {e}")

    try:
        book = deserialize(text)
    except RecipeLoadError as e:
        raise e.with_source(filepath.name)

    logger.info(f"Loaded {len(book)} recipe(s) from {filepath}")
    return book
