import io
import os
import zipfile
from dataclasses import asdict

import pandas as pd
from flask import Flask, jsonify, request, send_file
from flask_cors import CORS
from werkzeug.exceptions import RequestEntityTooLarge
from werkzeug.utils import secure_filename
from xlrd import XLRDError

from . import __version__, config
from .merge import preview_rows
from .records import clean_marks, clean_students
from .report import (
    MissingInputError, RenderError, ReportError, load_report_font,
    prepare_rows, render_rows, require_rows,
)

app = Flask(__name__)
CORS(app)

# --- Configuration ---
app.config['MAX_CONTENT_LENGTH'] = config.MAX_CONTENT_LENGTH
app.config['FONT_PATH'] = config.FONT_PATH
app.config['FONT_NAME'] = config.FONT_NAME
app.config['PREVIEW_LIMIT'] = config.PREVIEW_LIMIT
app.json.ensure_ascii = False
# Loaded on first use and shared afterwards; tests put a ready font here.
app.config['REPORT_FONT'] = None

SPREADSHEET_EXTENSIONS = ('.csv', '.xlsx', '.xls')


def get_report_font():
    font = app.config.get('REPORT_FONT')
    if font is None:
        font = load_report_font(app.config['FONT_PATH'], app.config['FONT_NAME'])
        app.config['REPORT_FONT'] = font
    return font


def _json_body():
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def _error_details(e):
    return str(e) or config.UNKNOWN_ERROR_MESSAGE


# --- Spreadsheet decoding ---
def read_spreadsheet(file):
    """
    Decodes an uploaded CSV or Excel sheet into a list of row mappings keyed
    by the sheet's header row. Blank cells come back as None. Legacy .xls
    workbooks go through xlrd, everything else Excel through openpyxl.
    """
    filename = file.filename.lower()
    if filename.endswith('.csv'):
        df = pd.read_csv(file, dtype=str, encoding='utf-8-sig', skip_blank_lines=True)
    elif filename.endswith('.xls'):
        df = pd.read_excel(file, sheet_name=0, engine='xlrd')
    else:
        df = pd.read_excel(file, sheet_name=0, engine='openpyxl')
    df = df.dropna(how='all')
    df = df.astype(object).where(df.notna(), None)
    return df.to_dict(orient='records')


# --- API Endpoints ---

@app.route('/api/generate-pdf', methods=['POST'])
def generate_pdf():
    """Merges marks with the roster and returns the classroom report as a PDF download."""
    try:
        payload = _json_body()
        rows = prepare_rows(payload.get('marksData'), payload.get('studentData'))
        pdf_bytes, summary = render_rows(rows, get_report_font())
        app.logger.info("Generated report: %s", summary)

        return send_file(
            io.BytesIO(pdf_bytes),
            mimetype='application/pdf',
            as_attachment=True,
            download_name=config.REPORT_FILENAME
        )

    except ReportError as e:
        if e.status_code >= 500:
            app.logger.error("Report generation failed: %s", e.details)
        else:
            app.logger.warning("Rejected report request: %s", e.message)
        return jsonify(e.to_dict()), e.status_code
    except RequestEntityTooLarge as e:
        return too_large(e)
    except Exception as e:
        app.logger.exception("PDF generation failed")
        return jsonify(RenderError(_error_details(e)).to_dict()), 500


@app.route('/api/parse-upload', methods=['POST'])
def parse_upload():
    """Decodes one uploaded spreadsheet into the row objects the report endpoint expects."""
    try:
        if 'file' not in request.files:
            return jsonify({'error': config.NO_FILE_PART_MESSAGE}), 400

        file = request.files['file']

        if file.filename == '':
            return jsonify({'error': config.NO_FILE_SELECTED_MESSAGE}), 400

        if not file.filename.lower().endswith(SPREADSHEET_EXTENSIONS):
            return jsonify({'error': config.BAD_FORMAT_MESSAGE}), 400

        try:
            rows = read_spreadsheet(file)
        except (ValueError, zipfile.BadZipFile, XLRDError) as e:
            app.logger.warning("Could not decode %s: %s", file.filename, e)
            return jsonify({'error': config.UNREADABLE_FILE_MESSAGE, 'details': _error_details(e)}), 400

        return jsonify({
            'rows': rows,
            'count': len(rows),
            'filename': secure_filename(file.filename) or file.filename,
        }), 200

    except RequestEntityTooLarge as e:
        return too_large(e)
    except Exception as e:
        app.logger.exception("Upload decoding failed")
        return jsonify({'error': config.UNREADABLE_FILE_MESSAGE, 'details': _error_details(e)}), 500


@app.route('/api/preview', methods=['POST'])
def preview():
    """
    Returns the first few rows as they will appear in the report. Either
    upload may be missing, in which case its columns carry a notice instead.
    """
    try:
        payload = _json_body()
        marks_data = payload.get('marksData')
        student_data = payload.get('studentData')
        if marks_data is None and student_data is None:
            raise MissingInputError()

        marks = clean_marks(require_rows(marks_data), parse_totals=False) if marks_data is not None else []
        students = clean_students(require_rows(student_data)) if student_data is not None else []
        rows = preview_rows(marks, students, limit=app.config['PREVIEW_LIMIT'])

        return jsonify({'rows': [asdict(row) for row in rows]}), 200

    except ReportError as e:
        return jsonify(e.to_dict()), e.status_code
    except RequestEntityTooLarge as e:
        return too_large(e)
    except Exception as e:
        app.logger.exception("Preview failed")
        return jsonify({'error': config.UNKNOWN_ERROR_MESSAGE, 'details': _error_details(e)}), 500


# --- Health and Info Endpoints ---
@app.route('/health', methods=['GET'])
def health_check():
    return jsonify({'status': 'healthy', 'message': 'Student reports API is running', 'version': __version__})


# --- Error Handlers ---
@app.errorhandler(413)
def too_large(e):
    return jsonify({'error': config.TOO_LARGE_MESSAGE}), 413


if __name__ == '__main__':
    app.logger.info("Starting student reports API...")
    app.run(host='0.0.0.0', port=int(os.environ.get('PORT', '5000')), debug=False)
