"""JSON envelope used by every /api endpoint.

``{"success": true, "data": ...}`` or ``{"success": false, "error": "..."}``.
"""

from flask import jsonify


def ok(data, status=200):
    return jsonify({'success': True, 'data': data}), status


def error(message, status=400):
    return jsonify({'success': False, 'error': message}), status


def bad(message):
    return error(message, 400)
