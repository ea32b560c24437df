import pytest

from app.errors import EmptyCorpusError
from app.models.analysis import AnalysisResult, ReviewVerdict, Summary, Verdict
from app.services import aggregator
from app.services.aggregator import fake_percentage, finalize, summarize


def _verdicts(*fake_flags):
    return [
        ReviewVerdict(
            review_number=i,
            verdict=Verdict.FAKE if fake else Verdict.GENUINE,
            confidence=80,
            reason="test",
        )
        for i, fake in enumerate(fake_flags, start=1)
    ]


class TestFakePercentage:
    def test_rounds_half_up(self):
        assert fake_percentage(1, 8) == 13

    def test_whole_corpus(self):
        assert fake_percentage(3, 3) == 100

    def test_zero_total_raises(self):
        with pytest.raises(EmptyCorpusError):
            fake_percentage(0, 0)


class TestSummarize:
    def test_counts_and_derived_fields(self):
        summary = summarize(_verdicts(True, False, False, False))
        assert summary.total_reviews == 4
        assert summary.fake_count + summary.genuine_count == summary.total_reviews
        assert summary.fake_percentage == 25
        assert summary.trust_score == 65
        assert summary.suspicious_patterns == []
        assert summary.buyer_recommendation == aggregator.RECOMMENDATION_MIXED

    @pytest.mark.parametrize(
        "flags, expected",
        [
            ((False,) * 10, aggregator.RECOMMENDATION_TRUSTED),
            ((True,) * 6 + (False,) * 4, aggregator.RECOMMENDATION_WARNING),
            ((True,) * 2 + (False,) * 8, aggregator.RECOMMENDATION_TRUSTED),
            ((True,) * 4 + (False,) * 6, aggregator.RECOMMENDATION_MIXED),
        ],
    )
    def test_recommendation_tiers(self, flags, expected):
        assert summarize(_verdicts(*flags)).buyer_recommendation == expected

    def test_trust_score_floor(self):
        assert summarize(_verdicts(True, True)).trust_score == 0

    def test_base_fields_are_kept(self):
        base = Summary(
            fake_count=9,
            trust_score=42,
            suspicious_patterns=["Copy-paste phrasing"],
            buyer_recommendation="Look elsewhere.",
        )
        summary = summarize(_verdicts(True, False), base=base)
        assert summary.fake_count == 1
        assert summary.trust_score == 42
        assert summary.suspicious_patterns == ["Copy-paste phrasing"]
        assert summary.buyer_recommendation == "Look elsewhere."

    def test_empty_is_neutral(self):
        summary = summarize([])
        assert summary == aggregator.empty_summary()
        assert summary.trust_score == aggregator.NEUTRAL_TRUST_SCORE


class TestFinalize:
    def test_recomputes_counts_from_verdicts(self):
        result = AnalysisResult(
            reviews=_verdicts(True, True, False),
            summary=Summary(total_reviews=5, fake_count=0, genuine_count=5, fake_percentage=0, trust_score=88),
        )
        summary = finalize(result).summary
        assert summary.total_reviews == 3
        assert summary.fake_count == 2
        assert summary.genuine_count == 1
        assert summary.fake_percentage == 67
        assert summary.trust_score == 88

    def test_degraded_passes_through(self):
        result = AnalysisResult(raw_analysis="free text", summary=Summary(trust_score=50))
        assert finalize(result) is result
        assert finalize(result).summary.fake_count is None
