from datetime import datetime, timezone
from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({
        'status': 'Server running',
        'message': 'Ludo Game Socket.IO Server',
        'timestamp': datetime.now(timezone.utc).isoformat(),
    })

@main.route('/health')
def health():
    registry = current_app.extensions['room_registry']
    return jsonify({
        'status': 'healthy',
        'rooms': registry.room_count,
        'connections': registry.connection_count,
    })
