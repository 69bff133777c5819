from flask_sqlalchemy import SQLAlchemy
from flask_marshmallow import Marshmallow
from flask_migrate import Migrate
from flask_bcrypt import Bcrypt
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from isave.core.logger import logger
import redis
import os

db = SQLAlchemy()
ma = Marshmallow()
migrate = Migrate()
bcrypt = Bcrypt()
jwt = JWTManager()
redis_client = None

# Create the limiter instance without initializing it
limiter = Limiter(
    key_func=get_remote_address,
    strategy=os.getenv("LIMITER_STRATEGY", "moving-window"),
    default_limits=os.getenv("LIMITER_DEFAULT_LIMITS", "200 per minute").split(","),
)


def init_redis(app):
    """Connect to redis when a URL is configured, otherwise run without it."""
    global redis_client

    redis_url = app.config.get("REDIS_URL")
    if not redis_url:
        logger.warning("REDIS_URL not set, application will run without redis")
        redis_client = None
        return None

    try:
        client = redis.StrictRedis.from_url(
            redis_url,
            decode_responses=True,
            socket_timeout=5,
            socket_connect_timeout=5,
            retry_on_timeout=True,
        )
        client.ping()
        logger.info("Redis connection established successfully")
        redis_client = client
    except redis.RedisError as e:
        logger.error(f"Failed to connect to Redis: {str(e)}")
        redis_client = None
        logger.warning("Application will run with reduced functionality")
    return redis_client


def init_limiter(app):
    """Initialize the limiter with the Flask app"""
    if redis_client is not None:
        app.config.setdefault("RATELIMIT_STORAGE_URI", app.config["REDIS_URL"])
        logger.info("Rate limiter using Redis storage")
    else:
        app.config.setdefault("RATELIMIT_STORAGE_URI", "memory://")
        logger.warning("Rate limiter using in-memory storage")
    app.config.setdefault("RATELIMIT_HEADERS_ENABLED", True)
    app.config.setdefault("RATELIMIT_IN_MEMORY_FALLBACK_ENABLED", True)
    limiter.init_app(app)
    logger.info(
        f"Flask-Limiter initialized (enabled={app.config.get('RATELIMIT_ENABLED', True)})"
    )
