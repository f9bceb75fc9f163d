"""
Web Interface for Page Comparison
"""

import os
import sys
import json
import logging
import tempfile
from collections.abc import Mapping
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from flask import Flask, Response, render_template, request, jsonify
from core.fetcher import FetchError, PageFetcher
from core.html_parser import HTMLParser
from core.page_analyzer import DEFAULT_THRESHOLD, PageAnalyzer, validate_threshold
from comparator.report_builder import ReportBuilder, default_report_filename
from utils.settings_store import SettingsStore

logger = logging.getLogger(__name__)

DATA_DIR = Path(os.environ.get('PAGE_COMPARE_DATA_DIR', Path(tempfile.gettempdir()) / 'page_compare'))


def env_flag(name: str) -> bool:
    return os.environ.get(name, '').strip().lower() in ('1', 'true', 'yes', 'on')


def create_app(data_dir=None, analyzer=None):
    """Create the Flask app. ``analyzer`` may be injected, e.g. with a stub fetcher."""
    app = Flask(__name__)
    store = SettingsStore(data_dir or DATA_DIR)
    page_analyzer = analyzer or PageAnalyzer(
        html_parser=HTMLParser(resolve_attributes=env_flag('PAGE_COMPARE_RESOLVE_ATTRIBUTES')),
        fetcher=PageFetcher(render=env_flag('PAGE_COMPARE_RENDER'))
    )
    app.config['SETTINGS_STORE'] = store
    app.config['PAGE_ANALYZER'] = page_analyzer

    @app.route('/')
    def index():
        """Render the comparison form with the last settings and results."""
        settings = store.load_settings()
        return render_template(
            'index.html',
            settings=settings,
            default_threshold=DEFAULT_THRESHOLD,
            results=store.load_results()
        )

    @app.route('/compare', methods=['POST'])
    def compare():
        """Fetch and compare the two pages, returning the report as JSON."""
        payload = request.get_json(silent=True)
        if payload is None:
            payload = request.form
        if not isinstance(payload, Mapping):
            return jsonify({'error': 'Request body must be a JSON object'}), 400

        pre_go_live_url = payload.get('pre_go_live_url') or ''
        current_url = payload.get('current_url') or ''
        if not isinstance(pre_go_live_url, str) or not isinstance(current_url, str):
            return jsonify({'error': 'URLs must be strings'}), 400
        pre_go_live_url = pre_go_live_url.strip()
        current_url = current_url.strip()

        if not pre_go_live_url or not current_url:
            return jsonify({'error': 'Please enter both URLs'}), 400
        try:
            threshold = validate_threshold(payload.get('success_threshold', DEFAULT_THRESHOLD))
        except ValueError as e:
            return jsonify({'error': str(e)}), 400

        store.save_settings(pre_go_live_url, current_url, threshold)

        progress = []
        try:
            # last_result is per analyzer, so each request gets its own
            request_analyzer = PageAnalyzer(html_parser=page_analyzer.html_parser, fetcher=page_analyzer.fetcher)
            comparison = request_analyzer.compare_urls(
                pre_go_live_url,
                current_url,
                threshold,
                on_progress=progress.append
            )
        except FetchError as e:
            logger.error(f"Error fetching {e.url}: {str(e)}")
            return jsonify({'error': f'Failed to compare pages: {str(e)}', 'url': e.url}), 502
        except Exception as e:
            logger.error(f"Error during comparison: {str(e)}", exc_info=True)
            return jsonify({'error': f'Failed to compare pages: {str(e)}'}), 500

        report = ReportBuilder().build_report(comparison, threshold)
        report['progress'] = progress
        stored = store.save_results(report)
        return jsonify(stored)

    @app.route('/results')
    def results():
        stored = store.load_results()
        if stored is None:
            return jsonify({'error': 'No results available'}), 404
        return jsonify(stored)

    @app.route('/results/clear', methods=['POST'])
    def clear_results():
        store.clear_results()
        return jsonify({'success': True})

    @app.route('/download/report')
    def download_report():
        """Download the last comparison report."""
        stored = store.load_results()
        if stored is None:
            return jsonify({'error': 'No results to export. Please run a comparison first.'}), 404
        return Response(
            json.dumps(stored, indent=2),
            mimetype='application/json',
            headers={'Content-Disposition': f'attachment; filename={default_report_filename()}'}
        )

    return app


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    port = int(os.environ.get("PORT", 5000))
    create_app().run(host='0.0.0.0', port=port)
