import os

class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev_secret_key')
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URI', 'sqlite:///maintenance.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # dashboard
    LOW_STOCK_THRESHOLD = int(os.getenv('LOW_STOCK_THRESHOLD', '5'))
    RECENT_BREAKDOWNS = int(os.getenv('RECENT_BREAKDOWNS', '3'))

    # logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_JSON = os.getenv('LOG_JSON', '').lower() in ('1', 'true', 'yes')
