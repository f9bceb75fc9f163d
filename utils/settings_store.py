"""
Settings Store Module
Persists the last comparison settings and results between runs.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional, Union

from .file_utils import ensure_directory, normalize_path, read_json, write_json

logger = logging.getLogger(__name__)

SETTINGS_FILE = 'settings.json'
RESULTS_FILE = 'results.json'


class SettingsStore:
    """Key-value store backed by two JSON files in ``directory``."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = normalize_path(directory)
        ensure_directory(self.directory)
        self.settings_path = self.directory / SETTINGS_FILE
        self.results_path = self.directory / RESULTS_FILE

    def load_settings(self) -> Dict:
        settings = read_json(self.settings_path)
        return settings if isinstance(settings, dict) else {}

    def save_settings(self, pre_go_live_url: str, current_url: str, success_threshold: int) -> Dict:
        settings = {
            'pre_go_live_url': pre_go_live_url,
            'current_url': current_url,
            'success_threshold': success_threshold,
        }
        write_json(self.settings_path, settings)
        return settings

    def load_results(self) -> Optional[Dict]:
        results = read_json(self.results_path)
        return results if isinstance(results, dict) else None

    def save_results(self, report: Dict) -> Dict:
        """Store a report, stamped with the time it was saved."""
        stored = dict(report)
        stored['timestamp'] = datetime.now(timezone.utc).isoformat()
        write_json(self.results_path, stored)
        return stored

    def clear_results(self) -> None:
        if self.results_path.exists():
            self.results_path.unlink()
            logger.info("Results cleared")
