"""Flask web interface for TV Italia."""

import logging
from functools import wraps
from flask import Flask, request, jsonify, session
from flask_cors import CORS
from flask_socketio import SocketIO, emit

from .admin import channel_from_form, check_password
from .catalog import ChannelCatalog
from .channel import Category, Channel
from .classifier import classify_channel
from .config import config
from .exceptions import ChannelNotFoundError, ChannelValidationError
from .models import init_db
from .news import fetch_feed
from .recommend import recommend
from .session import PlaybackController
from .views import build_home
from .youtube import YouTubeManager

# Initialize Flask app
app = Flask(__name__)
app.config['SECRET_KEY'] = config.SECRET_KEY
CORS(app, supports_credentials=True)
socketio = SocketIO(app, cors_allowed_origins="*")

youtube = YouTubeManager()

# Shared services (set by app.py, or created on first use)
_catalog = None
_controller = None
_history = None
_ticker = None

logger = logging.getLogger(__name__)

def set_services(catalog, controller=None, history=None, ticker=None):
    """Wire the catalog, playback controller, history and ticker."""
    global _catalog, _controller, _history, _ticker
    _catalog = catalog
    _controller = controller or PlaybackController(catalog)
    _controller.subscribe(broadcast_session)
    if history is not None:
        _controller.subscribe(history)
    _history = history
    _ticker = ticker

def get_catalog() -> ChannelCatalog:
    if _catalog is None:
        catalog = ChannelCatalog()
        catalog.load()
        set_services(catalog)
    return _catalog

def get_controller() -> PlaybackController:
    get_catalog()
    return _controller

def broadcast_session(playback):
    """Push session changes to connected clients."""
    try:
        socketio.emit('session_update', playback.status())
    except Exception as e:
        logger.error(f"Error broadcasting session update: {e}")

def channel_json(channel: Channel) -> dict:
    data = channel.to_dict()
    data['mode'] = classify_channel(channel).mode.value
    data['externalUrl'] = youtube.external_link(channel)
    return data

def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not session.get('is_admin'):
            return jsonify({'error': 'Administrator login required'}), 403
        return view(*args, **kwargs)
    return wrapper

@app.errorhandler(ChannelNotFoundError)
def handle_not_found(e):
    return jsonify({'error': str(e)}), 404

@app.errorhandler(ChannelValidationError)
def handle_invalid(e):
    return jsonify({'error': str(e)}), 400

# Catalog
@app.route('/api/categories')
def get_categories():
    return jsonify([{'id': c.name, 'label': c.value} for c in Category])

@app.route('/api/channels')
def get_channels():
    """Home view: featured channel, channel list and top rated."""
    catalog = get_catalog()
    category = Category.parse(request.args.get('category'), default=Category.ALL)
    search = request.args.get('q', '')

    home = build_home(catalog.channels, category, search)
    return jsonify({
        'featured': channel_json(home.featured) if home.featured else None,
        'channels': [channel_json(c) for c in home.channels],
        'top_rated': [channel_json(c) for c in home.top_rated],
        'load_error': catalog.load_error,
    })

@app.route('/api/channels/<channel_id>')
def get_channel(channel_id):
    return jsonify(channel_json(get_catalog().get(channel_id)))

@app.route('/api/channels/<channel_id>/news')
def get_channel_news(channel_id):
    channel = get_catalog().get(channel_id)
    return jsonify([item._asdict() for item in fetch_feed(channel.rss_url)])

@app.route('/api/channels/<channel_id>/videos')
def get_channel_videos(channel_id):
    channel = get_catalog().get(channel_id)
    return jsonify(youtube.get_channel_videos(channel.youtube_channel_id))

# Playback
@app.route('/api/channels/<channel_id>/play', methods=['POST'])
def play_channel(channel_id):
    """Open a playback session, closing the current one."""
    channel = get_catalog().get(channel_id)
    playback = get_controller().select(channel)
    return jsonify(playback.status())

@app.route('/api/session')
def get_session_status():
    return jsonify(get_controller().status())

@app.route('/api/session/close', methods=['POST'])
def close_session():
    get_controller().close()
    return jsonify({'message': 'Playback closed'})

@app.route('/api/session/rating', methods=['POST'])
def rate_session():
    data = request.get_json(silent=True) or {}
    playback = get_controller().session
    if playback is None:
        return jsonify({'error': 'No active playback'}), 400
    if not playback.set_rating(data.get('rating')):
        return jsonify({'error': 'Rating must be an integer from 1 to 5'}), 400
    return jsonify(playback.status())

# News and recommendations
@app.route('/api/ticker')
def get_ticker():
    """Ticker items and the one currently shown."""
    if _ticker is None:
        return jsonify({'current': None, 'items': []})
    current = _ticker.current()
    return jsonify({
        'current': current._asdict() if current else None,
        'items': [item._asdict() for item in _ticker.items],
    })

@app.route('/api/recommend', methods=['POST'])
def get_recommendation():
    data = request.get_json(silent=True) or {}
    query = str(data.get('query') or '').strip()
    if not query:
        return jsonify({'error': 'Missing query'}), 400

    result = recommend(query, get_catalog().channels)
    return jsonify({'text': result.text, 'channel_ids': result.channel_ids})

@app.route('/api/history')
def get_history():
    """Get playback history."""
    if _history is None:
        return jsonify([])
    return jsonify(_history.recent())

# Administration
@app.route('/api/admin/login', methods=['POST'])
def admin_login():
    data = request.get_json(silent=True) or {}
    if not check_password(data.get('password')):
        return jsonify({'error': 'Wrong password'}), 401
    session['is_admin'] = True
    return jsonify({'message': 'Logged in'})

@app.route('/api/admin/logout', methods=['POST'])
def admin_logout():
    session.pop('is_admin', None)
    return jsonify({'message': 'Logged out'})

@app.route('/api/admin/channels', methods=['POST'])
@admin_required
def add_channel():
    """Add a new channel."""
    catalog = get_catalog()
    data = request.get_json(silent=True)
    logger.info(f"Received channel data: {data}")

    channel = catalog.add_channel(channel_from_form(data, catalog))
    return jsonify(channel_json(channel)), 201

@app.route('/api/admin/channels/<channel_id>', methods=['PUT'])
@admin_required
def update_channel(channel_id):
    """Update a channel."""
    catalog = get_catalog()
    existing = catalog.get(channel_id)

    channel = catalog.update_channel(channel_from_form(request.get_json(silent=True), catalog, existing))
    return jsonify(channel_json(channel))

@app.route('/api/admin/channels/<channel_id>', methods=['DELETE'])
@admin_required
def delete_channel(channel_id):
    """Delete a channel."""
    get_catalog().delete_channel(channel_id)
    return jsonify({'message': 'Channel deleted successfully'})

# WebSocket events
@socketio.on('connect')
def handle_connect():
    """Handle client connection."""
    logger.info("Client connected")
    emit('connected', {'message': 'Connected to TV Italia'})

@socketio.on('request_status')
def handle_status_request():
    """Handle status request."""
    emit('session_update', get_controller().status())

def run_server():
    """Run the Flask server."""
    init_db()

    logger.info(f"Starting web server on {config.FLASK_HOST}:{config.FLASK_PORT}")
    try:
        socketio.run(app, host=config.FLASK_HOST, port=config.FLASK_PORT, debug=config.DEBUG)
    finally:
        get_controller().close()

if __name__ == '__main__':
    run_server()
