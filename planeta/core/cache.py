"""
Redis 访问封装

Redis 只用来缓冲帖子浏览量, 不是数据来源: 连接失败时记录日志并返回
中性值, 调用方自行回退到数据库。
"""
import logging

import redis

from planeta.core.config import settings

logger = logging.getLogger(__name__)


def post_views_key(post_id: str) -> str:
    return f"forum_post:{post_id}:views"


class RedisClient:
    """Singleton Redis Client Wrapper"""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(RedisClient, cls).__new__(cls)
            cls._instance.client = redis.Redis(
                host=settings.REDIS_HOST,
                port=settings.REDIS_PORT,
                db=settings.REDIS_DB,
                password=settings.REDIS_PASSWORD,
                decode_responses=True,
                socket_connect_timeout=1,
            )
        return cls._instance

    def get_client(self) -> redis.Redis:
        return self.client

    def incr(self, key: str) -> int:
        """Buffered counter value after the increment, 0 when Redis is unreachable."""
        try:
            return self.client.incr(key)
        except redis.RedisError as e:
            logger.error(f"Redis incr error on {key}: {e}")
            return 0

    def delete(self, *keys: str) -> bool:
        if not keys:
            return True
        try:
            self.client.delete(*keys)
            return True
        except redis.RedisError as e:
            logger.error(f"Redis delete error on {len(keys)} keys: {e}")
            return False


redis_client = RedisClient()
