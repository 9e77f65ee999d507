from tilerise.scoring import (
    color_count,
    match_score,
    match_value,
    norma_increment,
    rise_rate,
    wipe_bonus,
)


def test_match_value_table_and_extrapolation():
    assert [match_value(n) for n in range(3, 11)] == [300, 450, 650, 950, 1500, 2500, 4500, 7000]
    assert match_value(11) == 10000
    assert match_value(13) == 16000
    assert match_value(2) == 10


def test_match_score_multipliers_compound():
    assert match_score(3, combo=0, level=0) == 300
    assert match_score(4, combo=2, level=0) == 540
    assert match_score(3, combo=0, level=5) == 450
    assert match_score(5, combo=0, level=5) == 975


def test_level_formulas():
    assert wipe_bonus(0, 0) == 100
    assert wipe_bonus(3, 2) == 150
    assert norma_increment(1) == 120
    assert [color_count(level) for level in (0, 1, 2, 3, 4, 10)] == [4, 4, 5, 5, 6, 6]


def test_rise_rate_grows_then_caps():
    assert rise_rate(0) == 1 / 120
    assert rise_rate(1) > rise_rate(0)
    assert rise_rate(20) == rise_rate(100) == 4 / 120
