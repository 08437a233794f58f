import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    PORT = int(os.environ.get('PORT', '3001'))
    # Comma separated list, or '*' for any origin
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    # Room capacity and the minimum needed to start
    MAX_PLAYERS = int(os.environ.get('MAX_PLAYERS', '4'))
    MIN_PLAYERS = int(os.environ.get('MIN_PLAYERS', '2'))
    ROOM_CODE_LENGTH = int(os.environ.get('ROOM_CODE_LENGTH', '6'))
    # Client side bounds (seconds) before falling back to offline mode
    CONNECT_TIMEOUT_SEC = float(os.environ.get('CONNECT_TIMEOUT_SEC', '8'))
    REQUEST_TIMEOUT_SEC = float(os.environ.get('REQUEST_TIMEOUT_SEC', '10'))
    # Default relay for `flask play`
    SERVER_URL = os.environ.get('SERVER_URL') or 'http://localhost:3001'
