"""Persist rendered artifacts to a directory tree."""

from pathlib import Path
from typing import Dict, List, Union

from .logger import get_logger


def write_artifacts(
    output_dir: Union[str, Path], artifacts: Dict[str, str]
) -> List[Path]:
    """
    Write rendered artifacts below an output directory.

    Args:
        output_dir: Root directory; created if missing
        artifacts: Mapping of path relative to output_dir -> file content

    Returns:
        Paths written, in the order of the artifacts mapping

    Raises:
        OSError: If a directory cannot be created or a file cannot be written.
            Files written before the failure are left in place.
    """
    logger = get_logger("output_writer")
    root = Path(output_dir)
    root.mkdir(parents=True, exist_ok=True)

    written = []
    for relative_path, content in artifacts.items():
        output_path = root / relative_path
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w") as f:
            f.write(content)

        logger.debug(f"Wrote {output_path} ({len(content)} bytes)")
        written.append(output_path)

    logger.info(f"Wrote {len(written)} files to {root}")
    return written
