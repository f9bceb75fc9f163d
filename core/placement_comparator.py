"""
Placement Comparator Module
Approximates layout similarity from tag distribution, structure counts,
heading hierarchy and inline styling. No rendered geometry is involved.
"""

import logging
import math
from collections import Counter
from typing import Dict, Optional, Sequence, Tuple

from .page_snapshot import Element, PageSnapshot, PageStructure, StyledEntity
from .text_similarity import compare_heading_levels, round_half_up, weighted_score

logger = logging.getLogger(__name__)

PLACEMENT_WEIGHTS = {
    'positioning': 50,
    'layout': 30,
    'hierarchy': 15,
    'styling': 15,
}

# (structure category, weight) in summation order
LAYOUT_RATIO_WEIGHTS = (
    ('headings', 0.25),
    ('paragraphs', 0.20),
    ('links', 0.15),
    ('images', 0.25),
    ('lists', 0.15),
)

TAG_DISTRIBUTION_WEIGHT = 0.7
ELEMENT_COUNT_WEIGHT = 0.3

STYLE_KEYWORDS = ('margin', 'padding', 'width', 'height', 'display', 'position', 'float', 'flex', 'grid')


def count_ratio(count1: int, count2: int) -> float:
    if count1 == 0 and count2 == 0:
        return 1.0
    if count1 == 0 or count2 == 0:
        return 0.0
    return min(count1, count2) / max(count1, count2)


def count_similarity(count1: int, count2: int) -> int:
    max_count = max(count1, count2)
    if max_count == 0:
        return 100
    return round_half_up(max(0, 100 - (abs(count1 - count2) / max_count) * 100))


def compare_tag_distribution(tags1: Sequence[str], tags2: Sequence[str]) -> int:
    """Similarity of two tag frequency histograms, from the mean relative count difference."""
    if len(tags1) == 0 and len(tags2) == 0:
        return 100
    if len(tags1) == 0 or len(tags2) == 0:
        return 0

    freq1 = Counter(tags1)
    freq2 = Counter(tags2)

    # tags in first-seen order, page one first; fsum keeps the total exact
    differences = [
        abs(freq1[tag] - freq2[tag]) / max(freq1[tag], freq2[tag])
        for tag in dict.fromkeys([*freq1, *freq2])
    ]

    average_difference = math.fsum(differences) / len(differences)
    return round_half_up(max(0, 100 - average_difference * 100))


def entities_match(entity1: StyledEntity, entity2: StyledEntity) -> bool:
    """Entities pair up when they share a non-empty class name or id."""
    if entity1.class_name and entity1.class_name == entity2.class_name:
        return True
    if entity1.element_id and entity1.element_id == entity2.element_id:
        return True
    return False


def style_mismatches(style1: Optional[str], style2: Optional[str]) -> int:
    """Number of layout keywords present in exactly one of the two style strings."""
    style1 = (style1 or '').lower()
    style2 = (style2 or '').lower()
    return sum(1 for keyword in STYLE_KEYWORDS if (keyword in style1) != (keyword in style2))


class PlacementComparator:
    """Combines element positioning, layout ratio, visual hierarchy and styling."""

    def compare(self, pre_go_live: PageSnapshot, current: PageSnapshot) -> int:
        score, _ = self.compare_with_breakdown(pre_go_live, current)
        return score

    def compare_with_breakdown(self, pre_go_live: PageSnapshot,
                               current: PageSnapshot) -> Tuple[int, Dict[str, int]]:
        breakdown = {
            'positioning': self.compare_element_positioning(pre_go_live.elements, current.elements),
            'layout': self.compare_layout_structure(pre_go_live.structure, current.structure),
            'hierarchy': self.compare_visual_hierarchy(pre_go_live.structure, current.structure),
            'styling': self.analyze_styling_differences(pre_go_live.structure, current.structure),
        }
        score = weighted_score(breakdown, PLACEMENT_WEIGHTS)
        logger.debug(f"Placement breakdown: {breakdown}, final score: {score}")
        return score, breakdown

    def compare_element_positioning(self, elements1: Sequence[Element], elements2: Sequence[Element]) -> int:
        """
        Element positioning score.

        Elements carry no geometry, so this compares the distribution of
        tags (70%) and the element counts (30%).
        """
        if len(elements1) == 0 and len(elements2) == 0:
            return 100
        if len(elements1) == 0 or len(elements2) == 0:
            return 0

        tag_similarity = compare_tag_distribution(
            [element.tag for element in elements1],
            [element.tag for element in elements2]
        )
        size_similarity = count_similarity(len(elements1), len(elements2))
        return round_half_up(tag_similarity * TAG_DISTRIBUTION_WEIGHT + size_similarity * ELEMENT_COUNT_WEIGHT)

    def compare_layout_structure(self, structure1: PageStructure, structure2: PageStructure) -> int:
        weighted_sum = 0.0
        for category, weight in LAYOUT_RATIO_WEIGHTS:
            ratio = count_ratio(len(structure1.category(category)), len(structure2.category(category)))
            weighted_sum += ratio * weight
        return round_half_up(weighted_sum * 100)

    def compare_visual_hierarchy(self, structure1: PageStructure, structure2: PageStructure) -> int:
        return compare_heading_levels(
            [heading.level for heading in structure1.headings],
            [heading.level for heading in structure2.headings]
        )

    def analyze_styling_differences(self, structure1: PageStructure, structure2: PageStructure) -> int:
        """
        Compare layout-affecting inline styles of paired entities.

        Each entity of the first structure is paired with the first entity of
        the same category in the second structure sharing its class name or
        id. Pages with no pairs at all score 100.
        """
        style_differences = 0
        total_pairs = 0

        for category in PageStructure.CATEGORIES:
            candidates = structure2.category(category)
            for entity1 in structure1.category(category):
                match = next((entity2 for entity2 in candidates if entities_match(entity1, entity2)), None)
                if match is None:
                    continue
                total_pairs += 1
                style_differences += style_mismatches(entity1.style, match.style)

        if total_pairs == 0:
            return 100
        return round_half_up(max(0, 100 - (style_differences / total_pairs) * 100))
