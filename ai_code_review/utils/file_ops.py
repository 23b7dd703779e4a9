"""Safe file operations for AI Code Review."""

from __future__ import annotations

from pathlib import Path

from ai_code_review.utils.logger import get_logger

logger = get_logger(__name__)


def read_file_safe(path: Path | str, encoding: str = "utf-8") -> str | None:
    """
    Safely read a file's contents.

    Args:
        path: Path to the file
        encoding: File encoding (default: utf-8)

    Returns:
        File contents as string, or None if file cannot be read
    """
    path = Path(path)

    if not path.exists():
        logger.warning(f"File not found: {path}")
        return None

    if not path.is_file():
        logger.warning(f"Path is not a file: {path}")
        return None

    try:
        return path.read_text(encoding=encoding)
    except PermissionError:
        logger.error(f"Permission denied reading file: {path}")
        return None
    except UnicodeDecodeError:
        logger.error(f"Unicode decode error reading file: {path}")
        return None
    except OSError as e:
        logger.error(f"OS error reading file {path}: {e}")
        return None


def write_file_safe(
    path: Path | str,
    content: str,
    encoding: str = "utf-8",
    create_dirs: bool = True,
) -> bool:
    """
    Safely write content to a file.

    Args:
        path: Path to the file
        content: Content to write
        encoding: File encoding (default: utf-8)
        create_dirs: Create parent directories if they don't exist

    Returns:
        True if write was successful, False otherwise
    """
    path = Path(path)

    try:
        if create_dirs:
            path.parent.mkdir(parents=True, exist_ok=True)

        path.write_text(content, encoding=encoding)
        logger.debug(f"Successfully wrote file: {path}")
        return True
    except PermissionError:
        logger.error(f"Permission denied writing file: {path}")
        return False
    except OSError as e:
        logger.error(f"OS error writing file {path}: {e}")
        return False

