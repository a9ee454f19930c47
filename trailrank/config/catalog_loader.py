"""Load the route catalog and check its integrity."""

import math
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, PrivateAttr, ValidationError

from trailrank.exceptions import CatalogError, InputIntegrityError
from trailrank.types import (
    COMPUTED_CRITERION_IDS,
    Criterion,
    CriterionSource,
    CriterionValue,
    Factor,
    FactorWeight,
    Mountain,
    Route,
)
from trailrank.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent / "catalog.yaml"


class Catalog(BaseModel):
    """Read-only snapshot of factors, criteria, routes and their raw values."""

    model_config = ConfigDict(frozen=True)

    factors: tuple[Factor, ...]
    criteria: tuple[Criterion, ...]
    factor_weights: tuple[FactorWeight, ...]
    mountains: tuple[Mountain, ...]
    routes: tuple[Route, ...]
    values: tuple[CriterionValue, ...]

    _factors: dict[str, Factor] = PrivateAttr(default_factory=dict)
    _criteria: dict[str, Criterion] = PrivateAttr(default_factory=dict)
    _mountains: dict[str, Mountain] = PrivateAttr(default_factory=dict)
    _weights: dict[str, float] = PrivateAttr(default_factory=dict)
    _values: dict[tuple[str, str], float] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        self._factors = {f.id: f for f in self.factors}
        self._criteria = {c.id: c for c in self.criteria}
        self._mountains = {m.id: m for m in self.mountains}
        self._weights = {fw.factor_id: fw.weight for fw in self.factor_weights}
        self._values = {(v.route_id, v.criterion_id): v.value for v in self.values}

    def factor(self, factor_id: str) -> Optional[Factor]:
        return self._factors.get(factor_id)

    def criterion(self, criterion_id: str) -> Optional[Criterion]:
        return self._criteria.get(criterion_id)

    def mountain(self, mountain_id: str) -> Optional[Mountain]:
        return self._mountains.get(mountain_id)

    def factor_weight(self, factor_id: str) -> Optional[float]:
        return self._weights.get(factor_id)

    def value(self, route_id: str, criterion_id: str) -> Optional[float]:
        return self._values.get((route_id, criterion_id))

    @property
    def static_criteria(self) -> list[Criterion]:
        """Catalog criteria in factor order, then criterion order."""
        factor_order = {f.id: f.order for f in self.factors}
        return sorted(
            (c for c in self.criteria if c.source == CriterionSource.STATIC),
            key=lambda c: (factor_order.get(c.factor_id, 0), c.order),
        )

    @property
    def ordered_factors(self) -> list[Factor]:
        return sorted(self.factors, key=lambda f: f.order)

    def validate_integrity(self, weight_tolerance: float = 0.01) -> None:
        """Check cross-references, factor weights and value completeness.

        Raises:
            InputIntegrityError: On the first class of problem found
        """
        reserved = [c.id for c in self.criteria if c.id in COMPUTED_CRITERION_IDS]
        if reserved:
            raise InputIntegrityError(
                "Catalog criteria reuse ids of computed criteria",
                details={"criteria": reserved, "reserved": sorted(COMPUTED_CRITERION_IDS)},
            )

        not_static = [c.id for c in self.criteria if c.source != CriterionSource.STATIC]
        if not_static:
            raise InputIntegrityError(
                "Catalog criteria must be static",
                details={"criteria": not_static},
            )

        orphan_criteria = [c.id for c in self.criteria if c.factor_id not in self._factors]
        if orphan_criteria:
            raise InputIntegrityError(
                "Criteria reference unknown factors",
                details={"criteria": orphan_criteria},
            )

        orphan_routes = [r.id for r in self.routes if r.mountain_id not in self._mountains]
        if orphan_routes:
            raise InputIntegrityError(
                "Routes reference unknown mountains",
                details={"routes": orphan_routes},
            )

        unknown_weights = [fid for fid in self._weights if fid not in self._factors]
        missing_weights = [f.id for f in self.factors if f.id not in self._weights]
        if unknown_weights or missing_weights:
            raise InputIntegrityError(
                "Factor weights do not match factors",
                details={"unknown": unknown_weights, "missing": missing_weights},
            )

        total = sum(self._weights.values())
        if not math.isclose(total, 1.0, abs_tol=weight_tolerance):
            raise InputIntegrityError(
                f"Factor weights must sum to 1.0, got {total}",
                details={"weights": dict(self._weights)},
            )

        route_ids = {r.id for r in self.routes}
        stray = [
            (v.route_id, v.criterion_id) for v in self.values
            if v.route_id not in route_ids or v.criterion_id not in self._criteria
        ]
        if stray:
            raise InputIntegrityError(
                "Criterion values reference unknown routes or criteria",
                details={"values": stray},
            )

        missing = [
            (route.id, criterion.id)
            for route in self.routes
            for criterion in self.static_criteria
            if (route.id, criterion.id) not in self._values
        ]
        if missing:
            raise InputIntegrityError(
                "Routes are missing criterion values",
                details={"missing": missing},
            )


class CatalogLoader:
    """Loads the route catalog from YAML."""

    def __init__(self, catalog_path: Optional[Path] = None):
        """Initialize catalog loader.

        Args:
            catalog_path: Optional path to a catalog YAML file (bundled seed when None)
        """
        self.catalog_path = catalog_path or DEFAULT_CATALOG_PATH

    def load(self) -> Catalog:
        """Load and parse the catalog file.

        Returns:
            Parsed Catalog

        Raises:
            CatalogError: If the file is missing, not YAML, or malformed
        """
        logger.info(f"Loading catalog from {self.catalog_path}")

        if not self.catalog_path.exists():
            raise CatalogError(
                "Catalog file not found",
                details={"path": str(self.catalog_path)},
            )

        try:
            with open(self.catalog_path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise CatalogError(
                "Catalog file is not valid YAML",
                details={"path": str(self.catalog_path), "error": str(e)},
            ) from e

        if not isinstance(data, dict):
            raise CatalogError(
                "Catalog file must contain a mapping",
                details={"path": str(self.catalog_path)},
            )

        catalog = self.from_dict(data)

        logger.info(
            "Catalog loaded",
            factors=len(catalog.factors),
            criteria=len(catalog.criteria),
            routes=len(catalog.routes),
            values=len(catalog.values),
        )

        return catalog

    @staticmethod
    def from_dict(data: dict[str, Any]) -> Catalog:
        """Build a Catalog from parsed YAML.

        ``values`` maps route id to a mapping of criterion id to raw value.
        """
        try:
            values = tuple(
                CriterionValue(route_id=route_id, criterion_id=criterion_id, value=value)
                for route_id, row in (data.get("values") or {}).items()
                for criterion_id, value in row.items()
            )
            return Catalog(
                factors=tuple(Factor(**f) for f in data.get("factors", [])),
                criteria=tuple(Criterion(**c) for c in data.get("criteria", [])),
                factor_weights=tuple(FactorWeight(**w) for w in data.get("factor_weights", [])),
                mountains=tuple(Mountain(**m) for m in data.get("mountains", [])),
                routes=tuple(Route(**r) for r in data.get("routes", [])),
                values=values,
            )
        except (ValidationError, TypeError, AttributeError) as e:
            raise CatalogError(
                "Catalog data is malformed",
                details={"error": str(e)},
            ) from e
