from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from minikube.errors import ProvisionError

logger = logging.getLogger(__name__)

DIR_MODE = 0o777


def ensure_dirs(paths: Iterable[Path], *, mode: int = DIR_MODE) -> list[Path]:
    """Create every path (and missing ancestors) in order.

    Existing directories are left alone, so repeated calls are no-ops.

    Raises:
        ProvisionError: If any path cannot be created.
    """

    created: list[Path] = []
    for path in paths:
        existed = path.is_dir()
        try:
            path.mkdir(mode=mode, parents=True, exist_ok=True)
        except OSError as e:
            raise ProvisionError(f"Error creating minikube directory: {e}") from e
        if not existed:
            created.append(path)

    if created:
        logger.debug("dirs_created", extra={"paths": [str(p) for p in created]})
    return created
