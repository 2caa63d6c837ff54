from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the geoguess game server!'})


@main.route('/health')
def health():
    services = current_app.extensions['geoguess']
    return jsonify({
        'status': 'ok',
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'rooms': len(services.registry),
        'connections': len(services.events),
    })


@main.app_errorhandler(404)
def not_found(error):
    return jsonify({'error': 'Not found'}), 404


@main.app_errorhandler(500)
def internal_error(error):
    current_app.logger.error(f"[http-error] {error}")
    return jsonify({'error': 'Internal Server Error'}), 500
