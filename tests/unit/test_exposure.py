"""Unit tests for deposit-insurance exposure aggregation."""
from __future__ import annotations

from typing import Callable

import pytest

from fixed_income_monitor.engine import (
    classify_risk,
    normalize_institution,
    summarize_exposure,
)
from fixed_income_monitor.models import InstitutionExposure, Position, RiskLevel

MakePosition = Callable[..., Position]


def _holding(make: MakePosition, institution: str, gross: float) -> Position:
    return make(id=f"{institution}-{gross}", institution=institution, gross_future_value=gross)


class TestNormalizeInstitution:
    def test_trims_and_uppercases(self) -> None:
        assert normalize_institution("  banco x ") == "BANCO X"

    def test_case_variants_match(self) -> None:
        assert normalize_institution("Banco X") == normalize_institution("banco x ")


class TestClassifyRisk:
    @pytest.mark.parametrize(
        "total,expected",
        [
            (0.0, RiskLevel.SAFE),
            (350_000.0, RiskLevel.SAFE),
            (800_000.0, RiskLevel.SAFE),
            (800_000.01, RiskLevel.WARNING),
            (850_000.0, RiskLevel.WARNING),
            (1_000_000.0, RiskLevel.WARNING),
            (1_000_000.01, RiskLevel.OVER),
            (1_050_000.0, RiskLevel.OVER),
        ],
    )
    def test_thresholds(self, total: float, expected: RiskLevel) -> None:
        assert classify_risk(total) is expected

    def test_custom_limit(self) -> None:
        assert classify_risk(450.0, global_limit=500.0) is RiskLevel.WARNING
        assert classify_risk(501.0, global_limit=500.0) is RiskLevel.OVER


class TestSummarizeExposure:
    def test_empty_collection(self) -> None:
        report = summarize_exposure([])
        assert report.institutions == ()
        assert report.global_total == 0.0
        assert report.risk_level is RiskLevel.SAFE
        assert report.uncovered_amount == 0.0

    def test_groups_and_sorts_scenario(self, make_position: MakePosition) -> None:
        positions = [
            _holding(make_position, "Banco X", 200_000.0),
            _holding(make_position, "Banco Y", 50_000.0),
            _holding(make_position, "Banco X", 100_000.0),
        ]
        report = summarize_exposure(positions)
        assert report.global_total == 350_000.0
        assert report.risk_level is RiskLevel.SAFE
        assert report.institutions == (
            InstitutionExposure("BANCO X", 300_000.0),
            InstitutionExposure("BANCO Y", 50_000.0),
        )

    def test_case_varying_names_merge(self, make_position: MakePosition) -> None:
        positions = [
            _holding(make_position, "Banco X", 1_000.0),
            _holding(make_position, "banco x ", 2_000.0),
        ]
        report = summarize_exposure(positions)
        assert report.institution_count == 1
        assert report.institutions[0] == InstitutionExposure("BANCO X", 3_000.0)

    def test_uses_gross_not_net(self, make_position: MakePosition) -> None:
        position = make_position(gross_future_value=11_200.0, net_future_value=11_020.0)
        assert summarize_exposure([position]).global_total == 11_200.0

    def test_ties_broken_by_name(self, make_position: MakePosition) -> None:
        positions = [
            _holding(make_position, "Zeta", 10.0),
            _holding(make_position, "Alfa", 10.0),
        ]
        names = [e.institution for e in summarize_exposure(positions).institutions]
        assert names == ["ALFA", "ZETA"]

    def test_ties_after_rounding_broken_by_name(
        self, make_position: MakePosition
    ) -> None:
        # 0.1 + 0.2 sums to 0.30000000000000004 before rounding.
        positions = [
            make_position(id="z1", institution="Zeta", gross_future_value=0.1),
            make_position(id="z2", institution="Zeta", gross_future_value=0.2),
            make_position(id="a1", institution="Alfa", gross_future_value=0.3),
        ]
        report = summarize_exposure(positions)
        assert report.institutions == (
            InstitutionExposure("ALFA", 0.3),
            InstitutionExposure("ZETA", 0.3),
        )

    def test_over_limit(self, make_position: MakePosition) -> None:
        positions = [
            _holding(make_position, f"Bank {i}", 210_000.0) for i in range(5)
        ]
        report = summarize_exposure(positions)
        assert report.global_total == 1_050_000.0
        assert report.risk_level is RiskLevel.OVER
        assert report.uncovered_amount == pytest.approx(50_000.0)
        assert report.global_usage_pct == 100.0

    def test_warning(self, make_position: MakePosition) -> None:
        positions = [
            _holding(make_position, "A", 250_000.0),
            _holding(make_position, "B", 300_000.0),
            _holding(make_position, "C", 300_000.0),
        ]
        report = summarize_exposure(positions)
        assert report.global_total == 850_000.0
        assert report.risk_level is RiskLevel.WARNING
        assert report.global_usage_pct == pytest.approx(85.0)

    def test_per_institution_view(self, make_position: MakePosition) -> None:
        positions = [
            _holding(make_position, "A", 300_000.0),
            _holding(make_position, "B", 125_000.0),
        ]
        report = summarize_exposure(positions, per_institution_limit=250_000.0)
        a, b = report.institutions
        assert a.exceeds(report.per_institution_limit)
        assert a.usage_pct(report.per_institution_limit) == 100.0
        assert not b.exceeds(report.per_institution_limit)
        assert b.usage_pct(report.per_institution_limit) == pytest.approx(50.0)
        assert report.institutions_over_limit() == (a,)

    def test_does_not_mutate_input(self, make_position: MakePosition) -> None:
        positions = [_holding(make_position, "Banco X", 100.0)]
        snapshot = list(positions)
        summarize_exposure(positions)
        assert positions == snapshot
