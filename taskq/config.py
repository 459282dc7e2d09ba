from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    全局配置，从环境变量 / .env 中读取。
    """

    # 队列存储后端：redis / memory
    STORE_BACKEND: str = "redis"
    REDIS_URL: str = "redis://localhost:6379/0"
    QUEUE_KEY: str = "task_queue"

    # 消费锁：同一时间只允许一个 drain 持有
    LOCK_KEY: str = "task_queue:lock"
    LOCK_TTL_S: int = 60

    # HTTP 服务
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # 企业微信 Webhook 通知
    NOTIFY_TIMEOUT_S: float = 10.0

    # Notion 写入
    NOTION_API_BASE: str = "https://api.notion.com"
    NOTION_VERSION: str = "2022-06-28"
    NOTION_TIMEOUT_S: float = 20.0
    INSERT_MAX_ATTEMPTS: int = 3
    RATE_LIMIT_DEFAULT_DELAY_S: float = 2.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """
    获取全局单例配置实例。
    """
    return Settings()
