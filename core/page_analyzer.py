"""
Main Page Analyzer Interface
Coordinates extraction, content and placement comparison of two pages
and combines them into the overall pass/fail score.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Optional, Union

from .content_comparator import ContentComparator
from .fetcher import PageFetcher
from .html_parser import HTMLParser
from .page_snapshot import PageSnapshot
from .placement_comparator import PlacementComparator
from .text_similarity import round_half_up

logger = logging.getLogger(__name__)

CONTENT_SHARE = 0.6
PLACEMENT_SHARE = 0.4
DEFAULT_THRESHOLD = 80

ProgressCallback = Callable[[int], None]


def validate_threshold(value: Union[int, str, None]) -> int:
    """Parse a pass threshold, which must be an integer between 0 and 100."""
    try:
        threshold = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValueError('Please enter a valid threshold between 0 and 100') from None
    if threshold < 0 or threshold > 100:
        raise ValueError('Please enter a valid threshold between 0 and 100')
    return threshold


@dataclass
class PageComparison:
    overall_score: int
    content_score: int
    placement_score: int
    details: str
    content_breakdown: Dict[str, int] = field(default_factory=dict)
    placement_breakdown: Dict[str, int] = field(default_factory=dict)
    pre_go_live: Optional[PageSnapshot] = None
    current: Optional[PageSnapshot] = None

    def passes(self, threshold: int) -> bool:
        return self.overall_score >= threshold

    def to_dict(self) -> Dict:
        """Convert the comparison to the dictionary shape used by the UI and exports."""
        return {
            'overallScore': self.overall_score,
            'contentScore': self.content_score,
            'placementScore': self.placement_score,
            'details': self.details,
            'contentBreakdown': dict(self.content_breakdown),
            'placementBreakdown': dict(self.placement_breakdown),
            'preGoLiveData': self.pre_go_live.to_dict() if self.pre_go_live else None,
            'currentData': self.current.to_dict() if self.current else None,
        }


def generate_comparison_details(pre_go_live: PageSnapshot, current: PageSnapshot) -> str:
    """Diagnostic listing of URLs, titles and extraction counts for both pages."""
    details = [
        f"Pre-Go-Live URL: {pre_go_live.url}",
        f"Current URL: {current.url}",
        f"Pre-Go-Live Title: {pre_go_live.title}",
        f"Current Title: {current.title}",
        f"Pre-Go-Live Elements: {len(pre_go_live.elements)}",
        f"Current Elements: {len(current.elements)}",
        f"Pre-Go-Live Text Blocks: {len(pre_go_live.text_blocks)}",
        f"Current Text Blocks: {len(current.text_blocks)}",
    ]
    return '\n'.join(details)


class PageAnalyzer:
    def __init__(self,
                 html_parser: Optional[HTMLParser] = None,
                 fetcher: Optional[PageFetcher] = None):
        self.html_parser = html_parser or HTMLParser()
        self.fetcher = fetcher or PageFetcher()
        self.content_comparator = ContentComparator()
        self.placement_comparator = PlacementComparator()
        self.last_result: Optional[PageComparison] = None
        self.last_threshold: Optional[int] = None

    def compare(self, pre_go_live: PageSnapshot, current: PageSnapshot) -> PageComparison:
        """Score two snapshots. The overall score is 60% content and 40% placement."""
        content_score, content_breakdown = self.content_comparator.compare_with_breakdown(pre_go_live, current)
        logger.info(f"Content score result: {content_score}")
        placement_score, placement_breakdown = self.placement_comparator.compare_with_breakdown(pre_go_live, current)
        logger.info(f"Placement score result: {placement_score}")

        overall_score = round_half_up(content_score * CONTENT_SHARE + placement_score * PLACEMENT_SHARE)
        logger.info(f"Overall score result: {overall_score}")

        self.last_result = PageComparison(
            overall_score=overall_score,
            content_score=content_score,
            placement_score=placement_score,
            details=generate_comparison_details(pre_go_live, current),
            content_breakdown=content_breakdown,
            placement_breakdown=placement_breakdown,
            pre_go_live=pre_go_live,
            current=current
        )
        return self.last_result

    def compare_html(self,
                     pre_go_live_html: str,
                     current_html: str,
                     pre_go_live_url: str,
                     current_url: str) -> PageComparison:
        pre_go_live = self.html_parser.extract(pre_go_live_html, pre_go_live_url)
        current = self.html_parser.extract(current_html, current_url)
        return self.compare(pre_go_live, current)

    def compare_urls(self,
                     pre_go_live_url: str,
                     current_url: str,
                     threshold: int = DEFAULT_THRESHOLD,
                     on_progress: Optional[ProgressCallback] = None) -> PageComparison:
        """
        Fetch both pages and compare them.

        Args:
            pre_go_live_url: URL of the migrated page
            current_url: URL of the live page it replaces
            threshold: Pass threshold, 0-100
            on_progress: Optional callback receiving a completion percentage

        Raises:
            FetchError: If either page cannot be retrieved
            ValueError: If the threshold is out of range
        """
        self.last_threshold = validate_threshold(threshold)
        report = on_progress or (lambda percent: None)
        logger.info(f"Starting comparison between: {pre_go_live_url} and {current_url}")

        report(10)
        pre_go_live_html, current_html = self.fetcher.fetch_pair(pre_go_live_url, current_url)
        report(50)
        result = self.compare_html(pre_go_live_html, current_html, pre_go_live_url, current_url)
        report(100)
        return result

    def generate_report(self, threshold: Optional[int] = None,
                        output_path: Optional[Union[str, Path]] = None) -> str:
        """Generate a human-readable summary of the last comparison."""
        if not self.last_result:
            return "No comparison has been performed yet."

        if threshold is None:
            threshold = self.last_threshold if self.last_threshold is not None else DEFAULT_THRESHOLD
        result = self.last_result
        outcome = 'PASS' if result.passes(threshold) else 'FAIL'

        report = [
            "Page Comparison Report",
            "======================\n",
            f"Overall Score: {result.overall_score}%",
            f"Content Match: {result.content_score}%",
            f"Placement Match: {result.placement_score}%",
            f"Threshold: {threshold}%",
            f"Result: {outcome}\n",
            "Content Breakdown:",
        ]
        report.extend(f"- {name}: {score}%" for name, score in result.content_breakdown.items())
        report.append("\nPlacement Breakdown:")
        report.extend(f"- {name}: {score}%" for name, score in result.placement_breakdown.items())
        report.extend(["\nDetails:", result.details])

        report_text = "\n".join(report)

        if output_path:
            with open(output_path, 'w', encoding='utf-8') as f:
                f.write(report_text)

        return report_text
