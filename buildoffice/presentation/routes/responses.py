"""
Shared helpers for the JSON routes: request payloads, error replies and file downloads.
"""

from functools import wraps

from flask import current_app, jsonify, request, send_file

from buildoffice import db
from buildoffice.services.exports.excel_export import XLSX_MIMETYPE, workbook_bytes


def payload() -> dict:
    """JSON body of the request, falling back to form data"""
    data = request.get_json(silent=True)
    if data is None:
        data = request.form.to_dict()
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    return data


def json_error(message, status=400):
    return jsonify({'error': str(message)}), status


def handles_value_errors(logger):
    """Turn a ValueError raised by the business layer into a rolled back 400 reply"""
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except ValueError as e:
                db.session.rollback()
                logger.warning(f"{request.method} {request.path} rejected: {e}")
                return json_error(e)
        return wrapper
    return decorator


def app_origin() -> str:
    """Origin encoded into tool QR codes"""
    origin = current_app.config.get('APP_ORIGIN') or request.host_url
    return origin.rstrip('/')


def send_workbook(workbook, filename: str):
    return send_file(workbook_bytes(workbook), mimetype=XLSX_MIMETYPE, as_attachment=True, download_name=filename)


def send_pdf(buffer, filename: str, as_attachment: bool = True):
    return send_file(buffer, mimetype='application/pdf', as_attachment=as_attachment, download_name=filename)
