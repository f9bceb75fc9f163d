"""
File Utilities Module
Common file operations used by the CLI, the web app and the settings store.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)

HTML_EXTENSIONS = {'.html', '.htm'}


def normalize_path(path: Union[str, Path]) -> Path:
    """Convert string path to normalized Path object."""
    return Path(path).expanduser().resolve()


def is_html_file(path: Path) -> bool:
    return path.suffix.lower() in HTML_EXTENSIONS


def ensure_directory(directory: Path) -> None:
    """Ensure directory exists, create if necessary."""
    directory.mkdir(parents=True, exist_ok=True)


def read_file_content(file_path: Union[str, Path]) -> str:
    """
    Safely read file content with proper encoding.

    Args:
        file_path: Path to the file to read

    Returns:
        File contents as string

    Raises:
        FileNotFoundError: If file doesn't exist
        IOError: If file can't be read
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return f.read()
    except UnicodeDecodeError:
        # Pages saved in legacy encodings: keep what can be decoded
        with open(file_path, 'r', encoding='utf-8', errors='replace') as f:
            return f.read()


def read_json(file_path: Path) -> Optional[Any]:
    """Load JSON from ``file_path``; a missing or corrupt file reads as None."""
    if not file_path.exists():
        return None
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning(f"Ignoring unreadable JSON file {file_path}: {str(e)}")
        return None


def write_json(file_path: Path, data: Any) -> None:
    """Write ``data`` as indented JSON, replacing the file atomically."""
    ensure_directory(file_path.parent)
    temp_path = file_path.with_suffix(file_path.suffix + '.tmp')
    with open(temp_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2)
    temp_path.replace(file_path)
