import numpy as np

from qtcluster.clustering import build_candidates, select_winner
from qtcluster.clustering.candidates import Candidate
from qtcluster.geometry import Point, to_coordinate_array


def _coords(*pairs: tuple[int, int]) -> np.ndarray:
    return to_coordinate_array(Point(x, y) for x, y in pairs)


def test_every_point_lands_in_exactly_one_candidate():
    coords = _coords((0, 0), (10, 0), (11, 0), (12, 0), (1, 0))

    candidates = build_candidates(coords, max_diameter_squared=4.0)

    assert [candidate.indices for candidate in candidates] == [(0, 4), (1, 2, 3)]
    assert [candidate.number for candidate in candidates] == [0, 1]
    allocated = sorted(index for candidate in candidates for index in candidate.indices)
    assert allocated == list(range(5))


def test_growth_requires_every_member_within_threshold():
    # (3, 0) is within reach of (0, 0) and (6, 0) within reach of (3, 0),
    # but (6, 0) is too far from the anchor to join the same candidate.
    coords = _coords((0, 0), (3, 0), (6, 0))

    candidates = build_candidates(coords, max_diameter_squared=9.0)

    assert [candidate.indices for candidate in candidates] == [(0, 1), (2,)]


def test_growth_picks_smallest_worst_distance_with_lowest_index_on_ties():
    # (0, 1) and (1, 0) are both at distance 1 from the anchor; the earlier one joins first.
    coords = _coords((0, 0), (5, 5), (0, 1), (1, 0))

    candidates = build_candidates(coords, max_diameter_squared=2.0)

    assert candidates[0].indices == (0, 2, 3)
    assert candidates[1].indices == (1,)


def test_growth_stops_when_threshold_is_exceeded():
    coords = _coords((0, 0), (0, 2), (0, 4))

    candidates = build_candidates(coords, max_diameter_squared=3.9)

    assert [candidate.indices for candidate in candidates] == [(0,), (1,), (2,)]


def test_zero_threshold_only_merges_duplicates():
    coords = _coords((1, 1), (2, 2), (1, 1))

    candidates = build_candidates(coords, max_diameter_squared=0.0)

    assert [candidate.indices for candidate in candidates] == [(0, 2), (1,)]


def test_infinite_threshold_absorbs_everything_into_first_anchor():
    coords = _coords((0, 0), (1000, -1000), (-50, 7))

    candidates = build_candidates(coords, max_diameter_squared=float("inf"))

    assert len(candidates) == 1
    assert candidates[0].indices[0] == 0
    assert sorted(candidates[0].indices) == [0, 1, 2]


def test_empty_input_produces_no_candidates():
    assert build_candidates(_coords(), max_diameter_squared=1.0) == []


def test_select_winner_prefers_earliest_on_ties():
    candidates = [
        Candidate(number=0, indices=(0, 1)),
        Candidate(number=1, indices=(2, 3)),
        Candidate(number=2, indices=(4,)),
    ]

    assert select_winner(candidates).number == 0


def test_select_winner_picks_strictly_larger_later_candidate():
    candidates = [
        Candidate(number=0, indices=(0, 4)),
        Candidate(number=1, indices=(1, 2, 3)),
        Candidate(number=2, indices=(5, 6, 7)),
    ]

    winner = select_winner(candidates)

    assert winner.number == 1
    assert winner.anchor == 1
    assert winner.size == 3
