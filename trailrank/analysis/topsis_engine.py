"""TOPSIS ranking of catalog routes against one user's preferences."""

from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Sequence

import numpy as np

from trailrank.analysis.explanations import ExplanationBuilder
from trailrank.config.catalog_loader import Catalog, CatalogLoader
from trailrank.config.settings import Config, EngineConfig
from trailrank.config.weighting_rules import LOGISTICS_AND_COST
from trailrank.exceptions import InputIntegrityError
from trailrank.processing.augment import AugmentedRoute, CriteriaAugmenter, computed_criteria
from trailrank.processing.geo import GeoDistance
from trailrank.processing.mcdm import MCDMEvaluator, TopsisComputation
from trailrank.processing.weighting import PreferenceWeighter
from trailrank.types import (
    Criterion,
    CriterionScore,
    FactorSummary,
    Methodology,
    RankedRoute,
    RankingResult,
    RankingSummary,
    RankingWarning,
    Route,
    UserPreferences,
)
from trailrank.utils.logging import get_logger, ranking_context

logger = get_logger(__name__)

ALGORITHM_NAME = "TOPSIS (Technique for Order of Preference by Similarity to Ideal Solution)"


class TopsisEngine:
    """Scores, ranks and explains routes for a user.

    The catalog is read-only; every call to :meth:`rank` works on its own
    augmented copy of the route data, so calls may run concurrently.
    """

    def __init__(
        self,
        catalog: Catalog,
        settings: Optional[EngineConfig] = None,
        weighter: Optional[PreferenceWeighter] = None,
        augmenter: Optional[CriteriaAugmenter] = None,
        explainer: Optional[ExplanationBuilder] = None,
    ):
        """Initialize the engine.

        Args:
            catalog: Route catalog snapshot
            settings: Engine tuning (defaults when None)
            weighter: Preference weighter (built from settings when None)
            augmenter: Criteria augmenter (built from settings when None)
            explainer: Explanation builder (built from settings when None)
        """
        self.catalog = catalog
        self.settings = settings or EngineConfig()
        self.weighter = weighter or PreferenceWeighter(
            min_factor_weight=self.settings.min_factor_weight
        )
        self.augmenter = augmenter or CriteriaAugmenter(
            geo=GeoDistance(fallback_km=self.settings.fallback_distance_km),
            default_location=self.settings.default_location,
        )
        self.explainer = explainer or ExplanationBuilder(
            max_explanations=self.settings.max_explanations,
            criterion_ids_by_name={c.name: c.id for c in catalog.criteria},
        )

    @classmethod
    def from_config(cls, config: Config) -> "TopsisEngine":
        """Build an engine from application config, loading its catalog."""
        catalog = CatalogLoader(config.catalog_path).load()
        return cls(catalog, settings=config.engine)

    def criteria(self) -> list[Criterion]:
        """Static catalog criteria followed by the per-request computed ones."""
        logistics = next(
            (f for f in self.catalog.factors if f.name == LOGISTICS_AND_COST), None
        )
        if logistics is None:
            raise InputIntegrityError(
                f"Catalog has no '{LOGISTICS_AND_COST}' factor for computed criteria",
                details={"factors": [f.name for f in self.catalog.factors]},
            )
        return [*self.catalog.static_criteria, *computed_criteria(logistics.id)]

    def validate(self, routes: Sequence[Route]) -> None:
        """Reject incomplete input before any computation.

        Raises:
            InputIntegrityError: If the catalog or requested routes are inconsistent
        """
        self.catalog.validate_integrity(self.settings.factor_weight_tolerance)

        known = {r.id for r in self.catalog.routes}
        unknown = [r.id for r in routes if r.id not in known]
        if unknown:
            raise InputIntegrityError(
                "Routes are not in the catalog",
                details={"routes": unknown},
            )

    def _criterion_weights(
        self, criteria: list[Criterion], user_weights: dict[str, float]
    ) -> np.ndarray:
        weights = []
        for criterion in criteria:
            factor = self.catalog.factor(criterion.factor_id)
            if factor.name not in user_weights:
                raise InputIntegrityError(
                    "Factor has no preference weight",
                    details={"factor": factor.name, "weights": list(user_weights)},
                )
            weights.append(
                self.catalog.factor_weight(factor.id)
                * user_weights[factor.name]
                * criterion.weight_in_factor
            )
        return np.array(weights, dtype=np.float64)

    def _warnings(
        self,
        augmented: list[AugmentedRoute],
        criteria: list[Criterion],
        computation: TopsisComputation,
        user_location: str,
    ) -> list[RankingWarning]:
        warnings: list[RankingWarning] = []

        unresolved: dict[str, list[str]] = {}
        for item in augmented:
            if not item.location_resolved:
                unresolved.setdefault(item.mountain.location_key, []).append(item.route.id)
        for location, route_ids in unresolved.items():
            warnings.append(RankingWarning(
                kind="unknown_location",
                message=(
                    "Travel distance for these routes uses the fallback "
                    f"of {self.settings.fallback_distance_km:g} km"
                ),
                details={
                    "user_location": user_location,
                    "mountain_location": location,
                    "routes": route_ids,
                },
            ))

        for criterion, constant in zip(criteria, computation.constant_columns):
            if constant and len(augmented) > 1:
                warnings.append(RankingWarning(
                    kind="constant_criterion",
                    message=f"'{criterion.name}' has the same value for every route",
                    details={"criterion": criterion.id, "value": augmented[0].values[criterion.id]},
                ))

        degenerate = [
            augmented[i].route.id for i in np.flatnonzero(computation.degenerate_rows)
        ]
        if degenerate:
            warnings.append(RankingWarning(
                kind="degenerate_distance",
                message=(
                    "Routes coincide with both ideal and anti-ideal solutions; "
                    f"scored {self.settings.neutral_score:g}"
                ),
                details={"routes": degenerate},
            ))

        for warning in warnings:
            logger.warning(warning.message, kind=warning.kind, **warning.details)

        return warnings

    def rank(
        self,
        preferences: UserPreferences,
        routes: Optional[Sequence[Route]] = None,
    ) -> RankingResult:
        """Rank routes for one user.

        Args:
            preferences: User answers
            routes: Routes to rank (whole catalog when None)

        Returns:
            RankingResult ordered best first

        Raises:
            InputIntegrityError: If catalog data is incomplete
        """
        routes = list(self.catalog.routes if routes is None else routes)

        logger.info(
            "Starting TOPSIS ranking",
            routes=len(routes),
            experience=preferences.experience_level.value,
            budget=preferences.budget_range,
        )

        self.validate(routes)

        criteria = self.criteria()
        user_weights = self.weighter.weights(preferences)
        methodology = self._methodology(user_weights, len(criteria))

        if not routes:
            logger.warning("No routes to rank")
            return RankingResult(
                routes=[],
                methodology=methodology,
                summary=RankingSummary(total_routes=0, average_score=0.0, top_route_name="No routes found"),
            )

        augmented = self.augmenter.augment_all(routes, self.catalog, preferences)

        matrix = np.array(
            [[item.values[c.id] for c in criteria] for item in augmented],
            dtype=np.float64,
        )
        weights = self._criterion_weights(criteria, user_weights)
        beneficial = np.array([c.is_benefit for c in criteria], dtype=bool)

        computation = MCDMEvaluator.topsis(
            matrix, weights, beneficial, neutral_score=self.settings.neutral_score
        )

        user_location = preferences.location or self.settings.default_location
        warnings = self._warnings(augmented, criteria, computation, user_location)

        # equal scores fall back to catalog order
        catalog_index = {r.id: i for i, r in enumerate(self.catalog.routes)}
        order = sorted(
            range(len(augmented)),
            key=lambda i: (-computation.scores[i], catalog_index[augmented[i].route.id]),
        )

        ranked = [
            self._ranked_route(
                augmented[i], criteria, weights, computation, i, rank, preferences
            )
            for rank, i in enumerate(order, start=1)
        ]

        average = float(np.mean(computation.scores))
        result = RankingResult(
            routes=ranked,
            methodology=methodology,
            summary=RankingSummary(
                total_routes=len(ranked),
                average_score=round(average, 3),
                top_route_name=ranked[0].route_name,
            ),
            warnings=warnings,
        )

        logger.info(
            "TOPSIS ranking complete",
            total_routes=len(ranked),
            top_route=ranked[0].route_id,
            top_score=round(ranked[0].topsis_score, 4),
            warnings=len(warnings),
        )

        return result

    def rank_many(
        self,
        preferences_list: Sequence[UserPreferences],
        max_workers: Optional[int] = None,
    ) -> list[RankingResult]:
        """Rank for several users in parallel, results in input order."""
        def _run(indexed: tuple[int, UserPreferences]) -> RankingResult:
            index, preferences = indexed
            with ranking_context(request=index):
                return self.rank(preferences)

        workers = max_workers or self.settings.max_workers
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(_run, enumerate(preferences_list)))

    def _ranked_route(
        self,
        item: AugmentedRoute,
        criteria: list[Criterion],
        weights: np.ndarray,
        computation: TopsisComputation,
        row: int,
        rank: int,
        preferences: UserPreferences,
    ) -> RankedRoute:
        scores = [
            CriterionScore(
                criterion_id=criterion.id,
                criterion_name=criterion.name,
                factor_name=self.catalog.factor(criterion.factor_id).name,
                source=criterion.source,
                value=item.values[criterion.id],
                weight=float(weights[col]),
                is_benefit=criterion.is_benefit,
                normalized_value=float(computation.normalized[row, col]),
                weighted_value=float(computation.weighted[row, col]),
            )
            for col, criterion in enumerate(criteria)
        ]

        return RankedRoute(
            route_id=item.route.id,
            route_name=item.route.name,
            mountain_name=item.mountain.name,
            difficulty=item.route.difficulty,
            distance_km=item.route.distance_km,
            duration_hours=item.route.duration_hours,
            criteria=scores,
            distance_to_ideal=float(computation.distance_to_ideal[row]),
            distance_to_anti_ideal=float(computation.distance_to_anti_ideal[row]),
            topsis_score=float(computation.scores[row]),
            rank=rank,
            explanations=self.explainer.explain(item, preferences),
            estimated_cost=item.cost_breakdown,
        )

    def _methodology(self, user_weights: dict[str, float], num_criteria: int) -> Methodology:
        factors = [
            FactorSummary(
                name=factor.name,
                effective_weight=user_weights.get(factor.name, 0.0),
                description=factor.description or f"{factor.name} related criteria",
            )
            for factor in self.catalog.ordered_factors
        ]
        explanation = (
            "Your answers were analyzed using TOPSIS multi-criteria decision analysis. "
            f"Routes are evaluated across {num_criteria} criteria including difficulty, "
            "cost, accessibility, and scenic value. The algorithm finds the route closest "
            "to the ideal solution based on your preferences."
        )
        return Methodology(
            algorithm=ALGORITHM_NAME,
            factors=factors,
            user_preference_weights=dict(user_weights),
            explanation=explanation,
        )
