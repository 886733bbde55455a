"""
Background workers for Inkwell.

Importing this package binds dramatiq to Redis; actor modules import
``redis_broker`` before declaring actors so they register on it.
"""
import dramatiq
from dramatiq.brokers.redis import RedisBroker

from app.config import settings

redis_broker = RedisBroker(url=settings.redis_url)
dramatiq.set_broker(redis_broker)
