"""TOPSIS numerics over a routes x criteria decision matrix."""

from dataclasses import dataclass

import numpy as np

from trailrank.utils.logging import get_logger

logger = get_logger(__name__)

NEUTRAL_SCORE = 0.5


@dataclass
class TopsisComputation:
    """Every intermediate of one TOPSIS run, row-aligned with the input matrix."""

    normalized: np.ndarray
    weighted: np.ndarray
    ideal: np.ndarray
    anti_ideal: np.ndarray
    distance_to_ideal: np.ndarray
    distance_to_anti_ideal: np.ndarray
    scores: np.ndarray
    constant_columns: np.ndarray
    degenerate_rows: np.ndarray


class MCDMEvaluator:
    """Multi-criteria decision making using TOPSIS."""

    @staticmethod
    def vector_normalize(matrix: np.ndarray) -> np.ndarray:
        """Divide each column by its Euclidean norm.

        Columns whose norm is zero normalize to all zeros.

        Args:
            matrix: Raw decision matrix (alternatives x criteria)

        Returns:
            Normalized matrix of the same shape
        """
        norms = np.sqrt(np.sum(matrix ** 2, axis=0))
        safe = np.where(norms > 0, norms, 1.0)
        return np.where(norms > 0, matrix / safe, 0.0)

    @staticmethod
    def apply_weights(normalized: np.ndarray, weights: np.ndarray) -> np.ndarray:
        """Scale each column by its criterion weight."""
        return normalized * weights[np.newaxis, :]

    @staticmethod
    def ideal_solutions(
        weighted: np.ndarray, beneficial: np.ndarray
    ) -> tuple[np.ndarray, np.ndarray]:
        """Best and worst weighted value per criterion.

        Args:
            weighted: Weighted normalized matrix
            beneficial: Boolean per column, True if higher values are better

        Returns:
            (ideal, anti_ideal) vectors
        """
        col_max = np.max(weighted, axis=0)
        col_min = np.min(weighted, axis=0)
        ideal = np.where(beneficial, col_max, col_min)
        anti_ideal = np.where(beneficial, col_min, col_max)
        return ideal, anti_ideal

    @staticmethod
    def separation(weighted: np.ndarray, reference: np.ndarray) -> np.ndarray:
        """Euclidean distance of each row to a reference vector."""
        return np.sqrt(np.sum((weighted - reference[np.newaxis, :]) ** 2, axis=1))

    @staticmethod
    def closeness(
        distance_to_ideal: np.ndarray,
        distance_to_anti_ideal: np.ndarray,
        neutral_score: float = NEUTRAL_SCORE,
    ) -> np.ndarray:
        """Relative closeness D- / (D+ + D-), in [0, 1].

        Rows where both distances are zero score ``neutral_score``.
        """
        denominator = distance_to_ideal + distance_to_anti_ideal
        safe = np.where(denominator > 0, denominator, 1.0)
        scores = np.where(denominator > 0, distance_to_anti_ideal / safe, neutral_score)
        return np.clip(scores, 0.0, 1.0)

    @staticmethod
    def topsis(
        matrix: np.ndarray,
        weights: np.ndarray,
        beneficial: np.ndarray,
        neutral_score: float = NEUTRAL_SCORE,
    ) -> TopsisComputation:
        """TOPSIS (Technique for Order Preference by Similarity to Ideal Solution).

        Args:
            matrix: Raw decision matrix (alternatives x criteria)
            weights: Weight per criterion
            beneficial: Benefit direction per criterion
            neutral_score: Score when an alternative is equidistant at zero

        Returns:
            TopsisComputation with scores in [0, 1]
        """
        matrix = np.asarray(matrix, dtype=np.float64)
        weights = np.asarray(weights, dtype=np.float64)
        beneficial = np.asarray(beneficial, dtype=bool)

        if matrix.ndim != 2 or not (matrix.shape[1] == weights.shape[0] == beneficial.shape[0]):
            raise ValueError(
                f"Matrix shape {matrix.shape} does not match "
                f"{weights.shape[0]} weights / {beneficial.shape[0]} directions"
            )
        if matrix.shape[0] == 0:
            raise ValueError("TOPSIS needs at least one alternative")
        if not np.all(np.isfinite(matrix)):
            raise ValueError("Decision matrix contains NaN or infinite values")

        normalized = MCDMEvaluator.vector_normalize(matrix)
        weighted = MCDMEvaluator.apply_weights(normalized, weights)
        ideal, anti_ideal = MCDMEvaluator.ideal_solutions(weighted, beneficial)

        d_pos = MCDMEvaluator.separation(weighted, ideal)
        d_neg = MCDMEvaluator.separation(weighted, anti_ideal)
        scores = MCDMEvaluator.closeness(d_pos, d_neg, neutral_score)

        constant_columns = np.ptp(matrix, axis=0) == 0
        degenerate_rows = (d_pos + d_neg) == 0

        logger.info(
            "TOPSIS computed",
            alternatives=int(matrix.shape[0]),
            criteria=int(matrix.shape[1]),
            mean_score=float(np.mean(scores)),
            max_score=float(np.max(scores)),
        )

        return TopsisComputation(
            normalized=normalized,
            weighted=weighted,
            ideal=ideal,
            anti_ideal=anti_ideal,
            distance_to_ideal=d_pos,
            distance_to_anti_ideal=d_neg,
            scores=scores,
            constant_columns=constant_columns,
            degenerate_rows=degenerate_rows,
        )
