"""
Flask Web API for the Source Optimizer

This module exposes the optimization pipeline over HTTP: optimize posted
source text, optimize files on the server, and report statistics for the
runs served so far.

The file endpoint only touches files under ``app.config['OPTIMIZER_ROOT']``
and always writes next to the input, at its default output path.
"""

import os
import logging
import threading
from pathlib import Path
from typing import Dict, Any, Optional

from flask import Flask, request, jsonify
from flask_cors import CORS

from .. import __version__
from ..core.pipeline import CodeOptimizer, PipelineConfig
from ..core.language import LANGUAGE_NAMES, PROFILES, detect_language, language_from_name
from ..core.aggregator import RunningTotals
from ..core.scrubber import LiteralAwareScrubber
from ..core.errors import UnsupportedLanguage, OptimizerError

logger = logging.getLogger(__name__)


class OptimizerDashboard:
    """State shared by the API endpoints."""

    def __init__(self, root: Optional[str] = None):
        """Initialize the dashboard."""
        self.root = Path(root or os.getcwd()).resolve()
        self.totals = RunningTotals()
        self.request_count = 0
        self._lock = threading.Lock()

    def _record(self, result):
        with self._lock:
            self.request_count += 1
            self.totals.add(result)

    def statistics(self) -> Dict[str, Any]:
        """Summary of every run recorded so far."""
        with self._lock:
            return self.totals.summary().to_dict()

    def is_allowed(self, filepath: str) -> bool:
        """Whether filepath resolves to a location under the root."""
        path = Path(filepath).resolve()
        return path == self.root or self.root in path.parents

    def optimize_code(self, code: str, language: str, string_aware: bool = False) -> Dict[str, Any]:
        """
        Optimize posted source text.

        Raises:
            UnsupportedLanguage: If the language name is not recognized
        """
        kind = language_from_name(str(language))
        scrubber = LiteralAwareScrubber() if string_aware else None
        result = CodeOptimizer(scrubber=scrubber).optimize_text(code, kind)
        self._record(result)

        report = result.to_dict()
        report['output'] = result.output
        return report

    def optimize_file(self, filepath: str, language: Optional[str] = None,
                      string_aware: bool = False) -> Dict[str, Any]:
        """
        Optimize a file under the root and write its default output.

        Raises:
            UnsupportedLanguage: If the extension is unsupported, whatever the override
        """
        if detect_language(filepath) is None:
            raise UnsupportedLanguage(Path(filepath).suffix, path=filepath)

        config = PipelineConfig(
            input_path=filepath,
            language=language,
            string_aware=string_aware,
        )
        result = CodeOptimizer.from_config(config).optimize_file(config)
        self._record(result)
        return result.to_dict()


def create_app(config=None):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    if config:
        app.config.update(config)
    app.config.setdefault('OPTIMIZER_ROOT', os.getcwd())

    # Enable CORS for API endpoints
    CORS(app)

    dashboard = OptimizerDashboard(app.config['OPTIMIZER_ROOT'])
    app.extensions['source_optimizer'] = dashboard

    @app.route('/')
    @app.route('/api/health')
    def health():
        """Service status."""
        return jsonify({'success': True, 'service': 'source-optimizer', 'version': __version__})

    @app.route('/api/languages')
    def api_languages():
        """Supported language families."""
        return jsonify({
            'success': True,
            'languages': [
                {
                    'family': kind.value,
                    'name': profile.display_name,
                    'extensions': list(profile.extensions),
                    'overrides': [name for name, k in LANGUAGE_NAMES.items() if k == kind],
                }
                for kind, profile in PROFILES.items()
            ]
        })

    def bad_request(message):
        return jsonify({'success': False, 'error': message}), 400

    @app.route('/api/optimize', methods=['POST'])
    def api_optimize():
        """API endpoint to optimize posted source text."""
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return bad_request('Request body must be a JSON object')
        code = data.get('code')
        language = data.get('language')

        if not isinstance(code, str):
            return bad_request('Code is required')
        if not language:
            return bad_request('Language is required')

        try:
            report = dashboard.optimize_code(code, language, bool(data.get('string_aware')))
        except UnsupportedLanguage as e:
            return bad_request(str(e))

        return jsonify({'success': True, 'report': report})

    @app.route('/api/optimize/file', methods=['POST'])
    def api_optimize_file():
        """API endpoint to optimize a file under the configured root."""
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return bad_request('Request body must be a JSON object')
        filepath = data.get('filepath')
        language = data.get('language')

        if not filepath or not isinstance(filepath, str):
            return bad_request('Filepath is required')
        if language is not None and not isinstance(language, str):
            return bad_request('Language must be a string')
        if not dashboard.is_allowed(filepath):
            logger.warning(f"Rejected file outside {dashboard.root}: {filepath}")
            return jsonify({'success': False, 'error': 'File is outside the allowed root'}), 403
        if not os.path.isfile(filepath):
            return bad_request('File does not exist')

        try:
            report = dashboard.optimize_file(
                filepath,
                language=language,
                string_aware=bool(data.get('string_aware')),
            )
        except UnsupportedLanguage as e:
            return bad_request(str(e))
        except OptimizerError as e:
            logger.error(f"Error optimizing file {filepath}: {e}")
            return jsonify({'success': False, 'error': str(e)}), 500

        return jsonify({'success': True, 'report': report})

    @app.route('/api/statistics')
    def api_statistics():
        """Totals over every run served by this app."""
        return jsonify({'success': True, 'statistics': dashboard.statistics()})

    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 errors."""
        return jsonify({'success': False, 'error': 'Endpoint not found'}), 404

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        logger.error(f"Internal server error: {error}")
        return jsonify({'success': False, 'error': 'Internal server error'}), 500

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(debug=True, host='127.0.0.1', port=8080)
