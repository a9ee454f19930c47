"""Unit tests for catalog loading and integrity checks."""

from pathlib import Path

import pytest

from trailrank.config.catalog_loader import CatalogLoader
from trailrank.exceptions import CatalogError, InputIntegrityError


class TestCatalogLoader:
    """Tests for CatalogLoader."""

    def test_load_seed_catalog(self, seed_catalog):
        assert len(seed_catalog.factors) == 3
        assert len(seed_catalog.criteria) == 8
        assert len(seed_catalog.routes) == 4
        assert len(seed_catalog.values) == 32
        seed_catalog.validate_integrity()

    def test_accessors(self, seed_catalog):
        assert seed_catalog.mountain("rinjani").location_key == "lombok"
        assert seed_catalog.factor_weight("physical_demand") == pytest.approx(0.4)
        assert seed_catalog.value("merapi_summit", "estimated_cost") == 800.0
        assert seed_catalog.criterion("scenic_value").is_benefit
        assert seed_catalog.factor("nope") is None

    def test_static_criteria_order(self, seed_catalog):
        ids = [c.id for c in seed_catalog.static_criteria]
        assert ids == [
            "difficulty_level", "trek_distance", "elevation_gain",
            "estimated_cost", "trek_duration", "accessibility",
            "scenic_value", "crowding_level",
        ]

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(CatalogError, match="not found"):
            CatalogLoader(tmp_path / "missing.yaml").load()

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("factors: [unclosed")

        with pytest.raises(CatalogError, match="not valid YAML"):
            CatalogLoader(path).load()

    def test_non_mapping(self, tmp_path: Path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(CatalogError, match="mapping"):
            CatalogLoader(path).load()

    def test_malformed_entry(self, make_catalog):
        def mutate(data):
            data["routes"][0]["difficulty"] = "Impossible"

        with pytest.raises(CatalogError, match="malformed"):
            make_catalog(mutate)


class TestCatalogIntegrity:
    """Tests for Catalog.validate_integrity."""

    def test_missing_value(self, make_catalog):
        def mutate(data):
            del data["values"]["merapi_summit"]["scenic_value"]

        catalog = make_catalog(mutate)
        with pytest.raises(InputIntegrityError, match="missing criterion values") as exc:
            catalog.validate_integrity()

        assert exc.value.details["missing"] == [("merapi_summit", "scenic_value")]

    def test_weights_must_sum_to_one(self, make_catalog):
        def mutate(data):
            data["factor_weights"][0]["weight"] = 0.6

        with pytest.raises(InputIntegrityError, match="sum to 1.0"):
            make_catalog(mutate).validate_integrity()

    def test_weight_tolerance(self, make_catalog):
        def mutate(data):
            data["factor_weights"][0]["weight"] = 0.405

        catalog = make_catalog(mutate)
        catalog.validate_integrity(weight_tolerance=0.01)
        with pytest.raises(InputIntegrityError):
            catalog.validate_integrity(weight_tolerance=0.001)

    def test_missing_factor_weight(self, make_catalog):
        def mutate(data):
            data["factor_weights"] = data["factor_weights"][:2]

        with pytest.raises(InputIntegrityError, match="do not match"):
            make_catalog(mutate).validate_integrity()

    def test_orphan_criterion(self, make_catalog):
        def mutate(data):
            data["criteria"][0]["factor_id"] = "ghost"

        with pytest.raises(InputIntegrityError, match="unknown factors"):
            make_catalog(mutate).validate_integrity()

    def test_orphan_route(self, make_catalog):
        def mutate(data):
            data["routes"][0]["mountain_id"] = "ghost"

        with pytest.raises(InputIntegrityError, match="unknown mountains"):
            make_catalog(mutate).validate_integrity()

    def test_stray_value(self, make_catalog):
        def mutate(data):
            data["values"]["merapi_summit"]["ghost_criterion"] = 1.0

        with pytest.raises(InputIntegrityError, match="unknown routes or criteria"):
            make_catalog(mutate).validate_integrity()

    def test_non_finite_value(self, make_catalog):
        def mutate(data):
            data["values"]["merapi_summit"]["scenic_value"] = float("nan")

        with pytest.raises(CatalogError):
            make_catalog(mutate)

    def test_criterion_reusing_computed_id(self, make_catalog):
        """Test a catalog criterion may not shadow a per-request criterion."""
        def mutate(data):
            next(c for c in data["criteria"] if c["id"] == "accessibility")["id"] = "accessibility_score"
            for row in data["values"].values():
                row["accessibility_score"] = row.pop("accessibility")

        with pytest.raises(InputIntegrityError, match="computed criteria") as exc:
            make_catalog(mutate).validate_integrity()

        assert exc.value.details["criteria"] == ["accessibility_score"]

    def test_computed_source_rejected(self, make_catalog):
        """Test every catalog criterion must be static."""
        def mutate(data):
            next(c for c in data["criteria"] if c["id"] == "scenic_value")["source"] = "computed"

        with pytest.raises(InputIntegrityError, match="must be static") as exc:
            make_catalog(mutate).validate_integrity()

        assert exc.value.details["criteria"] == ["scenic_value"]
