"""
Text Similarity Module
Edit-distance based similarity scores shared by the page comparators.
"""

import math
from typing import Callable, Dict, Iterable, List, Sequence, TypeVar

from rapidfuzz.distance import Levenshtein

T = TypeVar('T')


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves always rounding up."""
    return int(math.floor(value + 0.5))


def levenshtein_distance(str1: str, str2: str) -> int:
    """Classic edit distance with unit insert/delete/substitute costs."""
    return Levenshtein.distance(str1, str2)


def calculate_text_similarity(text1: str, text2: str) -> int:
    """
    Similarity of two strings as an integer percentage.

    Identical strings (case-sensitive) score 100, which includes two empty
    strings. If only one side is empty the score is 0. Otherwise the
    distance is computed case-insensitively and scaled by the longer of
    the two original lengths.

    Args:
        text1: First string
        text2: Second string

    Returns:
        Integer in [0, 100]
    """
    if text1 == text2:
        return 100
    if len(text1) == 0 or len(text2) == 0:
        return 0

    distance = levenshtein_distance(text1.lower(), text2.lower())
    max_length = max(len(text1), len(text2))
    return max(0, round_half_up(((max_length - distance) / max_length) * 100))


def best_match_average(items1: Sequence[T], items2: Sequence[T],
                       scorer: Callable[[T, T], int]) -> int:
    """Average, over items1, of the best score found against any item of items2."""
    if len(items1) == 0 and len(items2) == 0:
        return 100
    if len(items1) == 0 or len(items2) == 0:
        return 0

    total_similarity = 0
    for item1 in items1:
        best_match = 0
        for item2 in items2:
            similarity = scorer(item1, item2)
            if similarity > best_match:
                best_match = similarity
        total_similarity += best_match

    return round_half_up(total_similarity / len(items1))


def compare_text_sets(texts1: Sequence[str], texts2: Sequence[str]) -> int:
    """
    Greedy best-match similarity between two collections of strings.

    The result is not symmetric: every string of ``texts1`` is matched
    against its closest counterpart in ``texts2`` and the mean is taken
    over ``texts1`` only.
    """
    return best_match_average(list(texts1), list(texts2), calculate_text_similarity)


def compare_text_collections(items1: Iterable, items2: Iterable) -> int:
    """Compare snapshot entities carrying a ``text`` attribute."""
    return compare_text_sets([item.text for item in items1], [item.text for item in items2])


def compare_images(images1: Sequence, images2: Sequence) -> int:
    """Compare images by alt text, a missing alt counting as an empty string."""
    return best_match_average(
        list(images1),
        list(images2),
        lambda img1, img2: calculate_text_similarity(img1.alt or '', img2.alt or '')
    )


def compare_lists(lists1: Sequence, lists2: Sequence) -> int:
    """Compare lists, each pair scored by the best-match similarity of their items."""
    return best_match_average(
        list(lists1),
        list(lists2),
        lambda list1, list2: compare_text_sets(list1.items, list2.items)
    )


def level_similarity(level1: int, level2: int) -> int:
    """Closeness of two heading levels; each level apart costs 20 points."""
    if level1 == level2:
        return 100
    return max(0, 100 - abs(level1 - level2) * 20)


def compare_heading_levels(levels1: List[int], levels2: List[int]) -> int:
    return best_match_average(levels1, levels2, level_similarity)


def weighted_score(scores: Dict[str, int], weights: Dict[str, int]) -> int:
    """Weighted mean of integer scores, rounded half-up; 0 when there is no weight."""
    total_weight = sum(weights.values())
    if total_weight == 0:
        return 0
    total_score = sum(scores[name] * weight for name, weight in weights.items())
    return round_half_up(total_score / total_weight)
