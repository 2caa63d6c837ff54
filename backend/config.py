import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Comma separated list, '*' allows every origin
    CORS_ALLOWED_ORIGINS = os.environ.get('CORS_ALLOWED_ORIGINS', '*')
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Guesses per participant before the room is finished
    MAX_ATTEMPTS = int(os.environ.get('MAX_ATTEMPTS', '6'))
    ROOM_CODE_LENGTH = int(os.environ.get('ROOM_CODE_LENGTH', '6'))
    # Chat ring buffer sizes (oldest dropped first)
    MAX_LOBBY_MESSAGES = int(os.environ.get('MAX_LOBBY_MESSAGES', '50'))
    MAX_ROOM_MESSAGES = int(os.environ.get('MAX_ROOM_MESSAGES', '50'))
    MAX_MESSAGE_LENGTH = int(os.environ.get('MAX_MESSAGE_LENGTH', '500'))
    # Reject guesses that are not a known location for the room's mode
    VALIDATE_GUESSES = os.environ.get('VALIDATE_GUESSES', 'true').lower() not in ('0', 'false', 'no')
    # Optional: alternative countries/capitals dataset (JSON). Empty uses the packaged one.
    WORD_POOL_PATH = os.environ.get('WORD_POOL_PATH', '')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
