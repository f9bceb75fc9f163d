"""
Report Builder Module
Generates exportable comparison reports (JSON data and a Jinja2 HTML page).
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / 'templates'
EXPORT_SOURCE = 'Page Compare'


def default_report_filename(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"page-compare-report-{now.strftime('%Y-%m-%d')}.json"


class ReportBuilder:
    def __init__(self, template_dir: Union[str, Path] = TEMPLATE_DIR):
        self.env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(['html'])
        )
        self.template = self.env.get_template('report.html')
        self.data: Dict = {}

    def build_report(self, comparison, threshold: int) -> Dict:
        """
        Collect a comparison into an exportable report.

        Args:
            comparison: PageComparison from the page analyzer
            threshold: Pass threshold the comparison was judged against

        Returns:
            Report dictionary, also kept on the builder for later export
        """
        data = comparison.to_dict()
        data.update({
            'threshold': threshold,
            'result': 'PASS' if comparison.passes(threshold) else 'FAIL',
            'exportDate': datetime.now(timezone.utc).isoformat(),
            'exportSource': EXPORT_SOURCE,
        })
        self.data = data
        return data

    def generate_json_report(self, output_path: Union[str, Path]) -> Path:
        """Write the collected report as indented JSON."""
        output_path = Path(output_path)
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(self.data, f, indent=2)
        logger.info(f"Report exported to {output_path}")
        return output_path

    def render_html(self) -> str:
        return self.template.render(report=self.data)

    def generate_html_report(self, output_path: Union[str, Path]) -> Path:
        """Render the collected report as a standalone HTML page."""
        output_path = Path(output_path)
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(self.render_html())
        logger.info(f"HTML report written to {output_path}")
        return output_path
