"""
Notification feed routes
"""

from flask import Blueprint, jsonify, request

from buildoffice.business.projects.notification_manager import NotificationManager
from buildoffice.logger import get_logger

logger = get_logger("buildoffice.routes.notifications")
bp = Blueprint('notifications', __name__)


@bp.route('')
def list():
    limit = request.args.get('limit', 50, type=int)
    notifications = NotificationManager.list(limit=limit)
    return jsonify({
        'notifications': [n.to_dict() for n in notifications],
        'unread': NotificationManager.unread_count(),
    })


@bp.route('/<int:notification_id>/read', methods=['POST'])
def mark_read(notification_id):
    notification = NotificationManager.mark_read(notification_id)
    return jsonify(notification.to_dict())


@bp.route('/read-all', methods=['POST'])
def mark_all_read():
    count = NotificationManager.mark_all_read()
    logger.info(f"Marked {count} notifications as read")
    return jsonify({'updated': count})


@bp.route('', methods=['DELETE'])
def clear():
    count = NotificationManager.clear()
    logger.info(f"Cleared {count} notifications")
    return jsonify({'deleted': count})
