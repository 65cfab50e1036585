from flask import Blueprint, Flask, current_app, jsonify, request, send_from_directory
from flask_cors import CORS
from werkzeug.exceptions import RequestEntityTooLarge

from songshelf.config import Config, load_config
from songshelf.exceptions import (
    DirectoryUnavailable,
    InvalidName,
    MissingPayload,
    RenameFailed,
    StagingFailed,
)
from songshelf.ingest import ingest
from songshelf.library import list_albums, list_audio_files
from songshelf.logging_config import get_logger

UPLOAD_FIELD = 'mp3File'

logger = get_logger(__name__)

bp = Blueprint('songshelf', __name__)


def _songs_root():
    return current_app.config['SONGS_ROOT']


# List MP3 files in an album folder
@bp.route('/api/songs/<folder>')
def get_songs(folder):
    try:
        return jsonify(list_audio_files(_songs_root(), folder))
    except DirectoryUnavailable:
        return jsonify({'error': 'Unable to access folder'}), 500


# List albums, the fallback "default" album excluded
@bp.route('/api/albums')
def get_albums():
    try:
        return jsonify(list_albums(_songs_root()))
    except DirectoryUnavailable:
        return jsonify({'error': 'Unable to fetch albums'}), 500


@bp.route('/api/upload', methods=['POST'])
def upload():
    file = request.files.get(UPLOAD_FIELD)
    try:
        if not file or not file.filename:
            raise MissingPayload(UPLOAD_FIELD)
        result = ingest(_songs_root(), file, file.filename, request.form)
    except MissingPayload:
        return jsonify({'error': 'No file uploaded'}), 400
    except InvalidName as e:
        logger.warning(f"Rejected upload: {e}")
        return jsonify({'error': 'Invalid album, song or singer name'}), 400
    except StagingFailed:
        return jsonify({'error': 'Error uploading file'}), 500
    except RenameFailed:
        return jsonify({'error': 'Error renaming file'}), 500
    return jsonify(result.to_dict())


# Serve stored files directly
@bp.route('/songs/<path:filename>')
def song_file(filename):
    return send_from_directory(_songs_root(), filename)


def _too_large(error):
    return jsonify({'error': 'File too large'}), 413


def create_app(config: Config = None) -> Flask:
    """Build the Flask application for *config* (loaded from the environment if omitted)."""
    if config is None:
        config = load_config()

    app = Flask(__name__)
    app.config['SONGS_ROOT'] = str(config.songs_path.resolve())
    app.config['MAX_CONTENT_LENGTH'] = config.max_content_length
    app.json.sort_keys = False

    CORS(app, origins=config.cors_origins)
    app.register_blueprint(bp)
    app.register_error_handler(RequestEntityTooLarge, _too_large)

    logger.debug(f"Serving songs from {app.config['SONGS_ROOT']}")
    return app
