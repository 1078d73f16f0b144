import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///snakeboard.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # HMAC key for session tickets. Required; never sent to clients.
    SESSION_HMAC_SECRET = os.environ.get('SESSION_HMAC_SECRET')
    # Leaderboard storage: 'upstash' (Redis REST) or 'sql' (SQLALCHEMY_DATABASE_URI)
    LEADERBOARD_BACKEND = os.environ.get('LEADERBOARD_BACKEND', 'upstash')
    UPSTASH_REDIS_REST_URL = os.environ.get('UPSTASH_REDIS_REST_URL')
    UPSTASH_REDIS_REST_TOKEN = os.environ.get('UPSTASH_REDIS_REST_TOKEN')
    STORE_TIMEOUT_SEC = float(os.environ.get('STORE_TIMEOUT_SEC', '5'))
    LEADERBOARD_KEY = os.environ.get('LEADERBOARD_KEY', 'snake:top5')
    LEADERBOARD_SIZE = int(os.environ.get('LEADERBOARD_SIZE', '5'))
    # Hard ceilings on a submitted run
    MAX_TICKS = int(os.environ.get('MAX_TICKS', '60000'))
    MAX_INPUTS = int(os.environ.get('MAX_INPUTS', '20000'))
    RULES_VERSION = os.environ.get('RULES_VERSION', 'v1')
    CORS_ORIGINS = [o.strip() for o in os.environ.get(
        'CORS_ORIGINS', 'http://localhost:5173,http://127.0.0.1:5173').split(',') if o.strip()]
