from __future__ import annotations

from datetime import date, timedelta

from factories import make_interaction, make_report, yearly_report
from fortune.services.themes import detect_major_themes, detect_significant_years, theme_label


def _days(count, interactions_at, start=date(2015, 1, 1)):
    return [
        make_report(start + timedelta(days=i), interactions=interactions_at.get(i, ()))
        for i in range(count)
    ]


def test_frequent_and_polar_patterns_are_kept():
    clash = ("career", make_interaction("Clash", unfavorable=True, tags=["Seven Killings"]))
    combo = ("social", make_interaction("Combination", favorable=True))
    harm = ("personal", make_interaction("Harm"))
    at = {}
    for i in range(10):
        at[i * 10] = [clash]
    for i in range(4):
        at[i * 10 + 1] = [combo]
    for i in range(2):
        at[i * 10 + 2] = [harm]

    themes = detect_major_themes(_days(100, at))

    assert [t.interaction_type for t in themes] == ["Clash", "Combination"]
    clash_theme = themes[0]
    assert clash_theme.related_tag == "Seven Killings"
    assert clash_theme.favorability == "unfavorable"
    assert clash_theme.percentage == 10
    assert clash_theme.significance == "very-high"
    assert clash_theme.label == "Seven Killings + Clash + Career (challenging)"
    assert themes[1].significance == "medium"


def test_dense_clusters_across_years_are_kept():
    harm = ("personal", make_interaction("Harm"))
    # Harm shows up 11 times in each of three calendar years, 3.3% of days overall.
    at = {}
    for year_block in (0, 400, 800):
        for i in range(11):
            at[year_block + i] = [harm]

    themes = detect_major_themes(_days(1000, at))

    assert len(themes) == 1
    assert themes[0].year_spread == 3
    assert themes[0].label == "Harm + Personal (active)"


def test_top_k_caps_the_result():
    at = {i: [("social", make_interaction(f"Type{i % 5}", favorable=True))] for i in range(10)}

    assert len(detect_major_themes(_days(10, at), top_k=3)) == 3


def test_theme_label_for_mixed_tone():
    assert theme_label(None, "Combination", "innovation", "mixed") == "Combination + Innovation (complex)"


def test_significant_years_are_most_intense_in_order():
    scores = [(60, 50), (90, 80), (75, 40), (50, 45), (80, 30), (65, 72), (70, 70), (55, 55), (85, 85), (40, 40)]
    reports = [yearly_report(2000 + i, opp, chal) for i, (opp, chal) in enumerate(scores)]

    years = detect_significant_years(reports, date(1990, 6, 1))

    assert len(years) == 8
    assert [y.year for y in years] == sorted(y.year for y in years)
    assert 2009 not in [y.year for y in years]
    by_year = {y.year: y for y in years}
    assert by_year[2008].type == "volatile"
    assert by_year[2002].type == "peak"
    assert by_year[2005].type == "challenging"
    assert by_year[2001].age == 11
    assert by_year[2001].intensity == 170
    assert len(by_year[2001].top_categories) == 2
