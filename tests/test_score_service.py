"""
Score calculation, band classification and trend tests
"""
import pytest

from medrank.schemas.dashboard import Band, Trend
from medrank.schemas.grand_test import ExamMode
from medrank.services.score_service import score_service

from conftest import make_test


def test_neet_pg_marks():
    obtained, total = score_service.calculate_marks(80, 20, ExamMode.NEET_PG)
    assert obtained == 300
    assert total == 400
    assert score_service.calculate_percentage(obtained, total) == 75


def test_ini_cet_marks():
    obtained, total = score_service.calculate_marks(50, 0, ExamMode.INI_CET)
    assert obtained == 50
    assert total == 50
    assert score_service.calculate_percentage(obtained, total) == 100


def test_ini_cet_negative_marking_is_rounded_to_two_decimals():
    obtained, total = score_service.calculate_marks(10, 7, ExamMode.INI_CET)
    assert obtained == 7.69
    assert total == 17


@pytest.mark.parametrize("correct,wrong", [(0, 0), (1, 0), (0, 1), (37, 13), (150, 49)])
def test_neet_pg_formula(correct, wrong):
    obtained, total = score_service.calculate_marks(correct, wrong, ExamMode.NEET_PG)
    assert obtained == 4 * correct - wrong
    assert total == 4 * (correct + wrong)


def test_custom_mode_has_no_formula():
    with pytest.raises(ValueError):
        score_service.calculate_marks(10, 2, ExamMode.CUSTOM)


def test_negative_counts_are_rejected():
    with pytest.raises(ValueError):
        score_service.calculate_marks(-1, 0, ExamMode.NEET_PG)


def test_zero_total_gives_zero_percentage():
    assert score_service.calculate_percentage(0, 0) == 0
    assert score_service.calculate_percentage(5, 0) == 0


def test_all_wrong_gives_negative_percentage():
    obtained, total = score_service.calculate_marks(0, 10, ExamMode.NEET_PG)
    assert obtained == -10
    assert total == 40
    assert score_service.calculate_percentage(obtained, total) == -25


def test_percentage_rounds_half_up():
    assert score_service.calculate_percentage(1, 8) == 13  # 12.5
    assert score_service.calculate_percentage(-1, 8) == -12  # -12.5


def test_build_subject_score_custom_keeps_entered_marks():
    score = score_service.build_subject_score("anat", ExamMode.CUSTOM, obtained=45.5, total=60)
    assert score.obtained_marks == 45.5
    assert score.total_marks == 60
    assert score.percentage == 76


def test_build_subject_score_ignores_entered_marks_in_count_modes():
    score = score_service.build_subject_score(
        "anat", ExamMode.NEET_PG, correct=80, wrong=20, obtained=1, total=1
    )
    assert score.obtained_marks == 300
    assert score.total_marks == 400
    assert score.percentage == 75


@pytest.mark.parametrize("percentage,band", [
    (-25, Band.WEAK),
    (0, Band.WEAK),
    (50, Band.WEAK),
    (51, Band.AVERAGE),
    (75, Band.AVERAGE),
    (79, Band.AVERAGE),
    (80, Band.STRONG),
    (100, Band.STRONG),
])
def test_band_boundaries(percentage, band):
    assert score_service.classify_band(percentage) == band


def test_trend_needs_more_than_one_test():
    assert score_service.compute_trend(90, 50, 1) is None


def test_trend_dead_zone():
    assert score_service.compute_trend(60.6, 60, 2) == Trend.UP
    assert score_service.compute_trend(60.5, 60, 2) == Trend.FLAT
    assert score_service.compute_trend(59.5, 60, 2) == Trend.FLAT
    assert score_service.compute_trend(59.4, 60, 2) == Trend.DOWN


def test_subject_average_counts_missing_scores_as_zero():
    tests = [make_test("a", "GT1", {"anat": 60}), make_test("b", "GT2", {})]
    assert score_service.subject_average(tests, "anat") == 30
    assert score_service.subject_average([], "anat") == 0
