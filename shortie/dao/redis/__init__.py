from shortie.dao.redis.redis_key_schema import RedisKeySchema
from shortie.dao.redis.mixins import RedisClientMixin
from shortie.dao.redis.token_redis_dao import TokenRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'TokenRedisDAO',
]
