"""Tests for the Bayesian-adjusted score."""

from decimal import Decimal

import pytest
from rankings.engine.ranking import RankingEngine
from rankings.engine.store import AggregateStore
from shared.config import EngineSettings


def _engine(**settings):
    return RankingEngine(AggregateStore(), EngineSettings(**settings))


class TestBayesianScore:
    def test_single_top_rating_is_pulled_toward_prior(self):
        engine = _engine(prior_mean=3.0, prior_weight=5)
        score = engine.bayesian_score(1, Decimal("5"))
        assert round(score, 2) == Decimal("3.33")

    def test_no_reviews_scores_the_prior_mean(self):
        engine = _engine(prior_mean=3.5, prior_weight=5)
        assert engine.bayesian_score(0, Decimal("0")) == Decimal("3.5")

    def test_zero_weight_and_no_reviews_scores_the_prior_mean(self):
        engine = _engine(prior_mean=3.0, prior_weight=0)
        assert engine.bayesian_score(0, Decimal("0")) == Decimal("3")

    def test_zero_weight_is_the_plain_average(self):
        engine = _engine(prior_weight=0)
        assert engine.bayesian_score(4, Decimal("14")) == Decimal("3.5")

    def test_converges_to_the_average(self):
        engine = _engine(prior_mean=3.0, prior_weight=5)
        count = 100_000
        score = engine.bayesian_score(count, Decimal("4.5") * count)
        assert abs(score - Decimal("4.5")) < Decimal("0.0001")

    @pytest.mark.parametrize("average", ["1", "2.5", "4", "5"])
    def test_lies_between_prior_and_average(self, average):
        engine = _engine(prior_mean=3.0, prior_weight=5)
        average = Decimal(average)
        score = engine.bayesian_score(7, average * 7)
        low, high = sorted([Decimal("3"), average])
        assert low <= score <= high

    def test_more_reviews_outrank_fewer_at_same_average(self):
        engine = _engine(prior_mean=3.0, prior_weight=5)
        few = engine.bayesian_score(2, Decimal("10"))
        many = engine.bayesian_score(50, Decimal("250"))
        assert many > few
