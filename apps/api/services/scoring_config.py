"""
Scoring table configuration.

A ScoringTable bundles the test catalog, the age brackets and the benchmark
repository into one immutable object. The scoring engine receives it by
injection; nothing reads benchmark data from module globals at score time.

Tables come from the built-in defaults or from a JSON file (see
SCORING_BENCHMARKS_FILE), so benchmarks can be updated without a deploy.
"""
import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from services.assessment_catalog import (
    DEFAULT_TEST_DEFINITIONS,
    TestCatalog,
    parse_test_definition,
)
from services.benchmark_repository import (
    DEFAULT_AGE_BRACKETS,
    DEFAULT_BENCHMARKS,
    AgeBracket,
    BenchmarkRepository,
    BenchmarkRow,
    rows_from_tuples,
)
from services.scoring_errors import ScoringConfigError

logger = logging.getLogger(__name__)

_ROW_FIELDS = ("excellent", "good", "average", "poor")


@dataclass(frozen=True)
class ScoringTable:
    """Everything the scoring engine needs, built once per process."""
    catalog: TestCatalog
    benchmarks: BenchmarkRepository

    @property
    def age_brackets(self) -> Tuple[AgeBracket, ...]:
        return self.benchmarks.age_brackets


def build_scoring_table(
    catalog: TestCatalog,
    rows: Mapping[str, Mapping[str, Mapping[str, BenchmarkRow]]],
    age_brackets=DEFAULT_AGE_BRACKETS,
) -> ScoringTable:
    """Validate and assemble a table. Raises ScoringConfigError."""
    repository = BenchmarkRepository(rows, catalog, age_brackets)
    return ScoringTable(catalog=catalog, benchmarks=repository)


@lru_cache(maxsize=1)
def default_scoring_table() -> ScoringTable:
    """The built-in catalog and benchmark table."""
    return build_scoring_table(
        TestCatalog(DEFAULT_TEST_DEFINITIONS),
        rows_from_tuples(DEFAULT_BENCHMARKS),
        DEFAULT_AGE_BRACKETS,
    )


def _parse_row(data: Any, where: str) -> BenchmarkRow:
    if not isinstance(data, Mapping):
        raise ScoringConfigError(f"{where}: benchmark row must be an object")
    missing = [f for f in _ROW_FIELDS if f not in data]
    if missing:
        raise ScoringConfigError(f"{where}: benchmark row missing {', '.join(missing)}")
    return BenchmarkRow(**{f: data[f] for f in _ROW_FIELDS})


def _whole_years(value: Any, where: str) -> int:
    # 18.0 is fine, 29.9 is not
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ScoringConfigError(f"{where} must be a whole number of years, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ScoringConfigError(f"{where} must be a whole number of years, got {value!r}")
    return int(value)


def _parse_bracket(data: Any) -> AgeBracket:
    if not isinstance(data, Mapping):
        raise ScoringConfigError(f"Invalid age bracket {data!r}: must be an object")
    try:
        label = str(data["label"])
        min_age, max_age = data["min_age"], data["max_age"]
    except KeyError as e:
        raise ScoringConfigError(f"Invalid age bracket {data!r}: missing {e}") from e
    return AgeBracket(
        label=label,
        min_age=_whole_years(min_age, f"age bracket {label} min_age"),
        max_age=_whole_years(max_age, f"age bracket {label} max_age"),
    )


def scoring_table_from_dict(data: Mapping[str, Any]) -> ScoringTable:
    """
    Build a ScoringTable from a parsed JSON document.

    Expected shape:
        {
          "age_brackets": [{"label": "18-25", "min_age": 18, "max_age": 25}, ...],
          "tests": [{"id": ..., "category": ..., "name": ..., "unit": ...,
                     "direction": "higher_is_better" | "lower_is_better"}, ...],
          "benchmarks": {test_id: {gender: {bracket_label: {excellent, good,
                         average, poor}}}}
        }

    "age_brackets" is optional and defaults to 18-25 / 26-35 / 36-45.
    """
    if not isinstance(data, Mapping):
        raise ScoringConfigError("Scoring table must be a JSON object")

    tests = data.get("tests")
    if not isinstance(tests, list) or not tests:
        raise ScoringConfigError("Scoring table needs a non-empty 'tests' list")
    catalog = TestCatalog(parse_test_definition(t) for t in tests)

    if "age_brackets" in data:
        if not isinstance(data["age_brackets"], list):
            raise ScoringConfigError("'age_brackets' must be a list")
        brackets = tuple(_parse_bracket(b) for b in data["age_brackets"])
    else:
        brackets = DEFAULT_AGE_BRACKETS

    raw_benchmarks = data.get("benchmarks", {})
    if not isinstance(raw_benchmarks, Mapping):
        raise ScoringConfigError("'benchmarks' must be an object")

    rows: Dict[str, Dict[str, Dict[str, BenchmarkRow]]] = {}
    for test_id, by_gender in raw_benchmarks.items():
        if not isinstance(by_gender, Mapping):
            raise ScoringConfigError(f"benchmarks.{test_id} must be an object")
        rows[test_id] = {}
        for gender, by_bracket in by_gender.items():
            if not isinstance(by_bracket, Mapping):
                raise ScoringConfigError(f"benchmarks.{test_id}.{gender} must be an object")
            rows[test_id][gender] = {
                label: _parse_row(row, f"benchmarks.{test_id}.{gender}.{label}")
                for label, row in by_bracket.items()
            }

    return build_scoring_table(catalog, rows, brackets)


def load_scoring_table(path: Union[str, Path]) -> ScoringTable:
    """Read and validate a JSON scoring table from disk."""
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ScoringConfigError(f"Cannot read scoring table {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ScoringConfigError(f"Scoring table {path} is not valid JSON: {e}") from e

    table = scoring_table_from_dict(data)
    logger.info(
        f"Loaded scoring table from {path}: {len(table.catalog)} tests, "
        f"{len(table.benchmarks)} benchmark rows"
    )
    return table


def resolve_scoring_table(benchmarks_file: Optional[str]) -> ScoringTable:
    """Table from benchmarks_file when set, else the built-in defaults."""
    if benchmarks_file:
        return _load_cached(str(benchmarks_file))
    return default_scoring_table()


def get_scoring_table() -> ScoringTable:
    """Active scoring table (SCORING_BENCHMARKS_FILE or the defaults)."""
    from core.config import scoring_config
    return resolve_scoring_table(scoring_config.benchmarks_file)


@lru_cache(maxsize=8)
def _load_cached(path: str) -> ScoringTable:
    return load_scoring_table(path)
