# File: tests/test_scoring.py
import pytest
from site_audit.probes.base import FailureKind, ProbeResult
from site_audit.scoring import (
    ScoreSet,
    combine,
    compute_scores,
    score_accessibility,
    score_carbon,
    score_markup,
    score_styles,
    score_vitals,
)


@pytest.mark.parametrize("violations,expected", [(0, 100), (3, 70), (10, 0), (12, 0)])
def test_accessibility_score(violations, expected):
    assert score_accessibility({"violationsCount": violations}) == expected


def test_accessibility_without_data_is_absent():
    assert score_accessibility(ProbeResult.failed("axe not injected", FailureKind.UNAVAILABLE)) is None
    assert score_accessibility(None) is None
    assert score_accessibility({"error": "boom"}) is None


def test_styles_score():
    assert score_styles({"status": "Within best-practice limits", "warnings": []}) == 100
    assert score_styles({"status": "Issues found", "warnings": ["Too many selectors"]}) == 60
    assert score_styles(ProbeResult.skip("No CSS found", length=0)) is None


@pytest.mark.parametrize("errors,expected", [(0, 100), (1, 90), (7, 30), (25, 0)])
def test_markup_score(errors, expected):
    assert score_markup({"errorCount": errors, "warningCount": 4}) == expected


@pytest.mark.parametrize(
    "metrics,expected",
    [
        ({"LCP": 1200, "CLS": 0.01, "TTFB": 300, "INP": 80}, 100),
        ({"LCP": 3000}, 80),
        ({"LCP": 4500}, 60),
        ({"CLS": 0.2}, 90),
        ({"CLS": 0.3}, 70),
        ({"TTFB": 900}, 90),
        ({"TTFB": 2000}, 80),
        ({"INP": 250}, 90),
        ({"INP": 400}, 80),
        ({"FID": 350}, 80),
        ({"LCP": 5000, "CLS": 0.5, "TTFB": 2500, "INP": 500}, 0),
        ({"LCP": 2600, "CLS": 0.11, "TTFB": 801, "INP": 201}, 50),
    ],
)
def test_vitals_score_deductions_are_additive(metrics, expected):
    assert score_vitals(metrics) == expected


def test_vitals_boundaries_are_strict():
    assert score_vitals({"LCP": 2500, "CLS": 0.1, "TTFB": 800, "INP": 200}) == 100


def test_vitals_without_metrics_is_absent():
    assert score_vitals({}) is None
    assert score_vitals(ProbeResult.ok({})) is None


@pytest.mark.parametrize(
    "grams,expected", [(0.2, 100), (0.5, 100), (0.8, 80), (1.5, 60), (3.1, 40)]
)
def test_carbon_bands(grams, expected):
    assert score_carbon({"co2PerVisit": grams}) == expected


def test_carbon_without_estimate_is_absent():
    assert score_carbon(ProbeResult.failed("API error 500", FailureKind.HTTP_ERROR)) is None


def test_overall_averages_only_present_scores():
    scores = ScoreSet(axe=80, css=None, html=100, web_vitals=60, carbon=None)
    assert scores.combined_overall == 80
    assert scores.to_dict() == {
        "axeScore": 80,
        "cssScore": None,
        "htmlScore": 100,
        "webVitalsScore": 60,
        "carbonScore": None,
        "combinedOverall": 80,
    }


def test_overall_counts_a_computed_zero():
    assert combine([0, 100]) == 50


def test_overall_rounds_half_up():
    assert combine([70, 71]) == 71
    assert combine([100, 90, 90]) == 93


def test_overall_is_zero_when_nothing_computed():
    assert ScoreSet().combined_overall == 0


def test_compute_scores_from_probe_results():
    scores = compute_scores(
        axe=ProbeResult.failed("axe not injected", FailureKind.UNAVAILABLE),
        css=ProbeResult.ok({"status": "Within best-practice limits", "warnings": []}),
        html=ProbeResult.ok({"errorCount": 2}),
        vitals=ProbeResult.ok({"LCP": 3000}),
        carbon=ProbeResult.skip("rate-limited", FailureKind.RATE_LIMITED),
    )
    assert scores.axe is None
    assert scores.carbon is None
    assert (scores.css, scores.html, scores.web_vitals) == (100, 80, 80)
    assert scores.combined_overall == 87
