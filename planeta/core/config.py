import os
import pathlib
from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = pathlib.Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    # 应用基础配置
    APP_NAME: str = Field(default='Planeta Keto Comunidad', description='应用名称')
    APP_VERSION: str = Field(default='1.0.0', description='应用版本')
    ENVIRONMENT: Literal['development', 'staging', 'production'] = Field(default='development', description='运行环境')
    DEBUG: bool = Field(default=False, description='调试模式')

    # 服务器配置
    HOST: str = Field(default='0.0.0.0', description='服务器主机')
    PORT: int = Field(default=8090, description='服务器端口')

    # 数据库配置
    DATABASE_URL: str = Field(description='数据库连接URL')
    DATABASE_POOL_SIZE: int = Field(default=20, description='数据库连接池大小')
    DATABASE_MAX_OVERFLOW: int = Field(default=10, description='数据库最大溢出连接')

    API_V1_PREFIX: str = Field("/api/v1", description="API 路径前缀")
    CORS_ORIGINS: List[str] = Field(default=["*"], description="允许的跨域来源")

    # Redis
    REDIS_HOST: str = Field(default='localhost')
    REDIS_PORT: int = Field(default=6379)
    REDIS_DB: int = Field(default=0)
    REDIS_PASSWORD: Optional[str] = Field(default=None)

    # 定时任务
    SCHEDULER_ENABLED: bool = Field(default=True, description='是否启动后台任务')
    SYNC_VIEWS_INTERVAL_MINUTES: int = Field(default=5, description='浏览量同步间隔')
    RECONCILE_INTERVAL_MINUTES: int = Field(default=60, description='计数器校准间隔')

    # 社区内容
    AUTO_APPROVE_CONTENT: bool = Field(default=True, description='新内容是否自动通过审核')
    SLUG_MAX_LENGTH: int = Field(default=96)
    SLUG_MAX_ATTEMPTS: int = Field(default=1000)
    SEARCH_RESULT_LIMIT: int = Field(default=20)
    MODERATION_BUCKET_LIMIT: int = Field(default=50, description='已通过/已拒绝列表的最大条数')
    MODERATION_TOKEN_REQUIRED: bool = Field(default=False, description='审核接口是否需要管理员令牌')
    ADMIN_TOKEN: Optional[str] = Field(default=None, description='管理员接口 Bearer 令牌')

    # 日志
    LOG_DIR: str = Field(default='logs')
    LOG_LEVEL: str = Field(default='INFO')
    LOG_JSON_FORMAT: bool = Field(default=False)
    LOG_MAX_BYTES: int = Field(default=10 * 1024 * 1024)
    LOG_BACKUP_COUNT: int = Field(default=5)

    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', case_sensitive=True, extra='ignore')

    @property
    def BASE_DIR(self) -> pathlib.Path:
        return BASE_DIR

    @property
    def is_development(self) -> bool:
        """是否为开发环境"""
        return self.ENVIRONMENT == 'development'

    @property
    def is_production(self) -> bool:
        """是否为生产环境"""
        return self.ENVIRONMENT == 'production'

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith('sqlite')

    @property
    def database_url_sync(self) -> str:
        """同步数据库URL (用于Alembic)"""
        return str(self.DATABASE_URL).replace('+asyncpg', '')


# 根据环境加载不同配置文件
@lru_cache
def get_settings() -> Settings:
    env = os.getenv('ENVIRONMENT', 'development')

    env_file_map = {
        'development': BASE_DIR / '.env.dev',
        'staging': BASE_DIR / '.env.staging',
        'production': BASE_DIR / '.env.prod',
    }
    env_file = env_file_map.get(env, BASE_DIR / '.env')

    return Settings(_env_file=env_file)


# 全局配置实例
settings = get_settings()
