from __future__ import annotations

"""Formula catalog (YAML).

Static per-category reference: display name, one-line description, the
mental-math formula and a worked example. Loaded once from the packaged
`resources/catalog.yml`.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .schema import ProblemCategory


@dataclass(frozen=True)
class ExampleStep:
    step: str
    explanation: str


@dataclass(frozen=True)
class CategoryExample:
    problem: str
    answer: str
    steps: List[ExampleStep] = field(default_factory=list)
    tip: Optional[str] = None


@dataclass(frozen=True)
class CategoryInfo:
    name: str
    description: str
    formula: str
    example: CategoryExample


def _default_catalog_path() -> str:
    return str(Path(__file__).resolve().parents[1] / "resources" / "catalog.yml")


def _parse_entry(cid: str, raw: Dict[str, Any]) -> CategoryInfo:
    ex = raw.get("example") or {}
    steps = [ExampleStep(step=str(s["step"]), explanation=str(s["explanation"])) for s in ex.get("steps") or []]
    tip = ex.get("tip")
    return CategoryInfo(
        name=str(raw["name"]),
        description=str(raw["description"]),
        formula=str(raw["formula"]),
        example=CategoryExample(
            problem=str(ex["problem"]),
            answer=str(ex["answer"]),
            steps=steps,
            tip=str(tip) if tip is not None else None,
        ),
    )


def load_catalog(path: str | None = None) -> Dict[ProblemCategory, CategoryInfo]:
    """Load and check the catalog; every category must have exactly one entry."""
    p = path or _default_catalog_path()
    with open(p, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    entries = data.get("categories") or {}

    catalog: Dict[ProblemCategory, CategoryInfo] = {}
    for cid, raw in entries.items():
        try:
            cat = ProblemCategory(cid)
        except ValueError:
            raise ValueError(f"Unknown category in catalog: {cid}") from None
        try:
            catalog[cat] = _parse_entry(cid, raw or {})
        except KeyError as e:
            raise ValueError(f"Catalog entry {cid} is missing {e}") from None

    missing = [c.value for c in ProblemCategory if c not in catalog]
    if missing:
        raise ValueError(f"Catalog has no entry for: {', '.join(missing)}")
    return catalog


CATEGORY_INFO: Dict[ProblemCategory, CategoryInfo] = load_catalog()


def get_category_info(category: ProblemCategory | str) -> CategoryInfo:
    return CATEGORY_INFO[ProblemCategory(category)]
