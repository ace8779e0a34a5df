import math

import pytest

from app.services.color import DEFAULT_HARMONY_THRESHOLDS, LabColor, compute_color_harmony
from app.services.color.harmony import (
    _classify_pair,
    analogous_hues,
    complementary_hue,
    hue_distance,
    is_neutral_color,
    triadic_hues,
)


def _hued(L: float, chroma: float, hue_deg: float) -> LabColor:
    rad = math.radians(hue_deg)
    return LabColor(L, chroma * math.cos(rad), chroma * math.sin(rad))


def test_neutral_pair_boosted_then_clamped():
    grey = LabColor(50, 0, 0, ratio=1.0, is_neutral=True)
    red = LabColor(50, 60, 0, ratio=1.0, is_neutral=False)
    kind, contribution = _classify_pair(grey, red, DEFAULT_HARMONY_THRESHOLDS)
    assert kind == "neutral"
    assert contribution == pytest.approx(1.2)

    result = compute_color_harmony([grey, red])
    assert result.harmony_type == "neutral"
    assert result.score == 1.0


def test_no_colors_and_single_color():
    empty = compute_color_harmony([])
    assert (empty.score, empty.harmony_type) == (0.0, "neutral")
    single = compute_color_harmony([LabColor(40, 30, 30)])
    assert (single.score, single.harmony_type) == (1.0, "monochromatic")


def test_far_apart_pair_rejects_everything():
    colors = [LabColor(10, 0, 0, is_neutral=True), LabColor(12, 1, 1, is_neutral=True), LabColor(95, 0, 0, is_neutral=True)]
    result = compute_color_harmony(colors)
    assert result.score == 0.0
    assert result.harmony_type == "mixed"


def test_analogous():
    result = compute_color_harmony([_hued(50, 30, 0), _hued(50, 30, 20)])
    assert result.harmony_type == "analogous"
    assert result.score == pytest.approx(1.0)


def test_monochromatic_needs_lightness_spread():
    kind, value = _classify_pair(_hued(30, 30, 40), _hued(60, 30, 45), DEFAULT_HARMONY_THRESHOLDS)
    assert kind == "monochromatic"
    assert value == 1.0
    kind, _ = _classify_pair(_hued(50, 30, 40), _hued(55, 30, 45), DEFAULT_HARMONY_THRESHOLDS)
    assert kind == "analogous"


def test_complementary():
    result = compute_color_harmony([LabColor(50, 20, 0), LabColor(50, -20, 0)])
    assert result.harmony_type == "complementary"
    assert result.score == pytest.approx(0.9)


def test_triadic_and_mixed_pair_classes():
    kind, value = _classify_pair(_hued(50, 30, 0), _hued(50, 30, 110), DEFAULT_HARMONY_THRESHOLDS)
    assert (kind, value) == ("triadic", 0.85)
    kind, value = _classify_pair(_hued(50, 30, 0), _hued(50, 30, 70), DEFAULT_HARMONY_THRESHOLDS)
    assert (kind, value) == ("mixed", 0.3)


def test_dominant_type_is_most_common_pair():
    grey = LabColor(50, 0, 0, is_neutral=True)
    colors = [grey, _hued(50, 20, 0), _hued(50, 20, 20)]
    result = compute_color_harmony(colors)
    # two neutral pairs, one analogous
    assert result.harmony_type == "neutral"
    assert 0.0 <= result.score <= 1.0


@pytest.mark.parametrize("hues", [(0, 180), (10, 200, 35), (90, 95, 100, 300)])
def test_score_in_unit_range(hues):
    result = compute_color_harmony([_hued(50, 15, h) for h in hues])
    assert 0.0 <= result.score <= 1.0


def test_hue_distance_wraps():
    assert hue_distance(350, 10) == pytest.approx(20)
    assert hue_distance(10, 350) == pytest.approx(20)
    assert hue_distance(0, 180) == pytest.approx(180)


def test_hue_helpers():
    assert complementary_hue(270) == pytest.approx(90)
    assert analogous_hues(10) == pytest.approx((340, 40))
    assert triadic_hues(300) == pytest.approx((60, 180))


def test_from_lab_derives_flags():
    beige = LabColor.from_lab(80, 3, 10, ratio=0.7)
    assert beige.is_neutral
    assert not beige.is_accent
    assert is_neutral_color(beige)
    accent = LabColor.from_lab(50, 60, 20, ratio=0.2)
    assert accent.is_accent
    assert not accent.is_neutral
    assert not LabColor.from_lab(50, 60, 20, ratio=0.1).is_accent


def test_dominant_type_tie_goes_to_first_seen():
    grey = LabColor(50, 0, 0, is_neutral=True)
    warm = [_hued(50, 20, 0), _hued(50, 20, 10), _hued(50, 20, 20)]
    # three analogous pairs and three neutral pairs either way
    analogous_first = compute_color_harmony(warm + [grey])
    neutral_first = compute_color_harmony([grey] + warm)
    assert analogous_first.harmony_type == "analogous"
    assert neutral_first.harmony_type == "neutral"
