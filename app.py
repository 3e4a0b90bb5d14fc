#!/usr/bin/env python3
"""
Flask Web Application for the Transaction Trace Analyzer
Provides REST API endpoints that turn rule engine log entries into waterfall results.
"""

from flask import Flask, request, jsonify
from werkzeug.utils import secure_filename
import ijson
import os
import tempfile
from txn_trace import WaterfallAnalyzer, LogEntry
from txn_trace.web import prepare_results

app = Flask(__name__)
app.config['MAX_CONTENT_LENGTH'] = 500 * 1024 * 1024
app.config['UPLOAD_FOLDER'] = tempfile.gettempdir()

ALLOWED_EXTENSIONS = {'json'}

def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def parse_bool(value, default=True):
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).lower() == 'true'


@app.route('/api/health')
def health():
    """Liveness check."""
    return jsonify({'status': 'ok'})


@app.route('/api/waterfall', methods=['POST'])
def waterfall_api():
    """
    API endpoint to analyze the entries of one trace.
    Accepts: application/json, either a list of entry objects or an object with:
      - 'entries': list of entry objects
      - 'trace_id': identifier to report (optional)
      - 'include_critical_path': true|false (optional, default: true)
    Returns: JSON waterfall document
    """
    payload = request.get_json(silent=True)
    if payload is None:
        return jsonify({'error': 'Request body must be JSON'}), 400

    if isinstance(payload, list):
        payload = {'entries': payload}
    if not isinstance(payload, dict) or not isinstance(payload.get('entries', []), list):
        return jsonify({'error': "Expected a list of entries or an object with 'entries'"}), 400

    include_critical_path = parse_bool(payload.get('include_critical_path'))
    include_critical_path = parse_bool(request.args.get('include_critical_path'), include_critical_path)

    try:
        entries = [LogEntry.from_dict(item) for item in payload.get('entries', [])]
    except (ValueError, TypeError) as e:
        return jsonify({'error': f'Invalid entry: {e}'}), 400

    try:
        analyzer = WaterfallAnalyzer(include_critical_path=include_critical_path)
        result = analyzer.analyze(entries, trace_id=str(payload.get('trace_id') or ''))
        return jsonify(prepare_results(result))

    except Exception as e:
        return jsonify({'error': str(e)}), 500


@app.route('/api/analyze', methods=['POST'])
def analyze_api():
    """
    API endpoint to analyze an entry export file.
    Accepts: multipart/form-data with fields:
      - 'file': entry JSON file
      - 'include_critical_path': 'true'|'false' (optional, default: 'true')
    Returns: JSON with one waterfall document per correlated trace
    """
    if 'file' not in request.files:
        return jsonify({'error': 'No file provided'}), 400

    file = request.files['file']

    if not file.filename:
        return jsonify({'error': 'No file selected'}), 400

    if not allowed_file(file.filename):
        return jsonify({'error': 'Invalid file type. Only JSON files are allowed.'}), 400

    include_critical_path = parse_bool(request.form.get('include_critical_path'))

    filename = secure_filename(file.filename)
    # Unique path per request so concurrent uploads never share a file
    with tempfile.NamedTemporaryFile(suffix='.json', dir=app.config['UPLOAD_FOLDER'],
                                     delete=False) as tmp:
        filepath = tmp.name

    try:
        file.save(filepath)

        analyzer = WaterfallAnalyzer(include_critical_path=include_critical_path)
        results = analyzer.analyze_file(filepath)

        return jsonify({
            'filename': filename,
            'trace_count': len(results),
            'traces': [prepare_results(result) for result in results.values()]
        })

    except ijson.JSONError as e:
        return jsonify({'error': f'Malformed JSON file: {e}'}), 400

    except Exception as e:
        return jsonify({'error': str(e)}), 500

    finally:
        if os.path.exists(filepath):
            os.remove(filepath)


if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=5001)
