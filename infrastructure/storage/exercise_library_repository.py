"""
YAML-backed exercise library.

The bundled catalog lives in shared/dictionaries/exercise_library.yaml:

    exercises:
      - name: Bench Press
        muscle_group: chest
        rest_seconds: 180
      - name: Plank
        muscle_group: core
        is_time_based: true

A custom file with the same layout can replace it via the
EXERCISE_LIBRARY_PATH setting.
"""
import logging
import pathlib
from functools import lru_cache
from typing import List, Optional, Tuple, Union

import yaml
from pydantic import ValidationError

from backend.core.normalize import normalize_exercise_name
from backend.errors import ExerciseLibraryError
from domain.models import LibraryExercise

logger = logging.getLogger(__name__)

ROOT = pathlib.Path(__file__).resolve().parents[2]
DEFAULT_LIBRARY_PATH = ROOT / "shared" / "dictionaries" / "exercise_library.yaml"


@lru_cache(maxsize=8)
def _load_cached(path: str) -> Tuple[LibraryExercise, ...]:
    try:
        data = yaml.safe_load(pathlib.Path(path).read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ExerciseLibraryError(f"Exercise library {path} is not valid YAML", [str(e)]) from e

    items = data.get("exercises") if isinstance(data, dict) else data
    if not isinstance(items, list):
        raise ExerciseLibraryError(
            f"Exercise library {path} must contain a list of exercises"
        )

    exercises: List[LibraryExercise] = []
    errors: List[str] = []
    for index, item in enumerate(items):
        try:
            exercises.append(LibraryExercise.model_validate(item))
        except ValidationError as e:
            for error in e.errors():
                location = ".".join(str(part) for part in error["loc"]) or "entry"
                errors.append(f"exercises[{index}].{location}: {error['msg']}")

    if errors:
        raise ExerciseLibraryError(f"Exercise library {path} has invalid entries", errors)

    logger.info("Loaded %d library exercises from %s", len(exercises), path)
    return tuple(exercises)


def load_exercise_library(path: Union[str, pathlib.Path, None] = None) -> List[LibraryExercise]:
    """
    Load and validate an exercise library file (cached per path).

    Args:
        path: YAML file; defaults to the bundled library. A path that does
            not exist logs a warning and falls back to the bundled library.

    Raises:
        ExerciseLibraryError: If the file is malformed
    """
    resolved = pathlib.Path(path) if path else DEFAULT_LIBRARY_PATH
    if not resolved.is_file():
        logger.warning("Exercise library %s not found; using bundled library", resolved)
        resolved = DEFAULT_LIBRARY_PATH
    return list(_load_cached(str(resolved)))


class YamlExerciseLibraryRepository:
    """
    ExerciseLibraryRepository backed by a YAML catalog.

    Catalog order is preserved. Duplicate names (after normalization) keep
    the first entry.
    """

    def __init__(self, path: Union[str, pathlib.Path, None] = None):
        self._exercises: List[LibraryExercise] = []
        self._by_name = {}
        for exercise in load_exercise_library(path):
            key = exercise.normalized_name
            if key in self._by_name:
                logger.debug("Skipping duplicate library exercise %r", exercise.name)
                continue
            self._by_name[key] = exercise
            self._exercises.append(exercise)

    def get_all(self) -> List[LibraryExercise]:
        return list(self._exercises)

    def find(self, name: str) -> Optional[LibraryExercise]:
        return self._by_name.get(normalize_exercise_name(name))

    def search(self, query: str, *, limit: int = 20) -> List[LibraryExercise]:
        needle = normalize_exercise_name(query)
        matches = [e for e in self._exercises if needle in e.normalized_name]
        return matches[:max(limit, 0)]
