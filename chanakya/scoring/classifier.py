"""
Maps a 0-100 score to exactly one performance band
"""
import math
from typing import Tuple

from chanakya.exceptions import ScoreOutOfRangeError
from chanakya.scoring.criteria import SCALE_MAX, SCALE_MIN, SCORING_SCALE, ScoreBand, validate_scale


class ScoreClassifier:
    """
    First matching band wins, checked from the highest band down.

    Band ranges are inclusive integers; a fractional score belongs to the band
    whose lower bound it has reached, so 89.5 is GOOD and 90.0 is EXCELLENT.
    """

    def __init__(self, scale: Tuple[ScoreBand, ...] = SCORING_SCALE):
        validate_scale(scale)
        self.scale = tuple(sorted(scale, key=lambda b: b.range_min, reverse=True))

    def classify(self, score: float) -> ScoreBand:
        if score is None or math.isnan(score) or score < SCALE_MIN or score > SCALE_MAX:
            raise ScoreOutOfRangeError(score)

        for band in self.scale:
            if score >= band.range_min:
                return band

        # validate_scale guarantees the lowest band starts at SCALE_MIN
        raise ScoreOutOfRangeError(score)

    def matching_bands(self, score: float) -> list[ScoreBand]:
        """Every band whose inclusive range contains the score"""
        return [b for b in self.scale if b.range_min <= score <= b.range_max]


default_classifier = ScoreClassifier()


def classify(score: float) -> ScoreBand:
    return default_classifier.classify(score)
