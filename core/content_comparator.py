"""
Content Comparator Module
Scores how closely the textual content of two page snapshots matches.
"""

import logging
from typing import Dict, Tuple

from .page_snapshot import PageMetadata, PageSnapshot, PageStructure
from .text_similarity import (
    calculate_text_similarity,
    compare_images,
    compare_lists,
    compare_text_collections,
    weighted_score,
)

logger = logging.getLogger(__name__)

CONTENT_WEIGHTS = {
    'title': 10,
    'text': 40,
    'structure': 30,
    'metadata': 20,
}

STRUCTURE_WEIGHTS = {
    'headings': 30,
    'paragraphs': 25,
    'links': 20,
    'images': 15,
    'lists': 10,
}

METADATA_WEIGHTS = {
    'title': 40,
    'description': 30,
    'keywords': 20,
    'viewport': 10,
}


class ContentComparator:
    """Combines title, text block, structure and metadata similarity."""

    def compare(self, pre_go_live: PageSnapshot, current: PageSnapshot) -> int:
        score, _ = self.compare_with_breakdown(pre_go_live, current)
        return score

    def compare_with_breakdown(self, pre_go_live: PageSnapshot,
                               current: PageSnapshot) -> Tuple[int, Dict[str, int]]:
        """Return the content score together with each factor's score."""
        breakdown = {
            'title': calculate_text_similarity(pre_go_live.title, current.title),
            'text': compare_text_collections(pre_go_live.text_blocks, current.text_blocks),
            'structure': self.compare_structure(pre_go_live.structure, current.structure),
            'metadata': self.compare_metadata(pre_go_live.metadata, current.metadata),
        }
        score = weighted_score(breakdown, CONTENT_WEIGHTS)
        logger.debug(f"Content breakdown: {breakdown}, final score: {score}")
        return score, breakdown

    def compare_structure(self, structure1: PageStructure, structure2: PageStructure) -> int:
        scores = {
            'headings': compare_text_collections(structure1.headings, structure2.headings),
            'paragraphs': compare_text_collections(structure1.paragraphs, structure2.paragraphs),
            'links': compare_text_collections(structure1.links, structure2.links),
            'images': compare_images(structure1.images, structure2.images),
            'lists': compare_lists(structure1.lists, structure2.lists),
        }
        return weighted_score(scores, STRUCTURE_WEIGHTS)

    def compare_metadata(self, metadata1: PageMetadata, metadata2: PageMetadata) -> int:
        # charset does not contribute to the score
        scores = {
            name: calculate_text_similarity(getattr(metadata1, name), getattr(metadata2, name))
            for name in METADATA_WEIGHTS
        }
        return weighted_score(scores, METADATA_WEIGHTS)
