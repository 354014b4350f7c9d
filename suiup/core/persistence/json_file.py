"""
JSON document persistence — atomic write, strict and lenient reads.

Writes go to a temp file in the target directory, then rename, so a
crash mid-write never leaves a truncated document behind.
"""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def write_json_atomic(path: Path, data: Any) -> None:
    """Write ``data`` as pretty-printed JSON (atomic).

    Args:
        path: Target file.  Parent directories are created.
        data: JSON-serializable value.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    content = json.dumps(data, indent=2, ensure_ascii=False) + "\n"

    fd, tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.stem}_",
        suffix=".tmp",
    )
    tmp = Path(tmp_path)
    try:
        with open(fd, "w", encoding="utf-8") as fh:
            fh.write(content)
        tmp.replace(path)
        logger.debug("Saved %s", path)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise


def read_json(path: Path) -> Any:
    """Read and parse a JSON file.  Errors propagate to the caller."""
    return json.loads(path.read_text(encoding="utf-8"))


def load_model(path: Path, model: type[M]) -> M:
    """Load a document, falling back to a fresh ``model()`` when unusable.

    For bookkeeping files (install registry, tool status) that can be
    rebuilt.  Never use this for the user's config file.
    """
    if not path.is_file():
        logger.debug("No document at %s, starting fresh", path)
        return model()

    try:
        return model.model_validate(read_json(path))
    except json.JSONDecodeError as e:
        logger.warning("Corrupt document %s: %s, starting fresh", path, e)
        return model()
    except Exception as e:
        logger.warning("Cannot load %s: %s, starting fresh", path, e)
        return model()


def save_model(document: BaseModel, path: Path) -> None:
    write_json_atomic(path, document.model_dump(mode="json"))
