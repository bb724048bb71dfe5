"""应用配置模块

使用 Pydantic Settings 管理应用配置，支持从 .env 文件加载环境变量
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """应用配置类"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # 应用配置
    APP_TITLE: str = "生产跟踪系统"
    APP_DESCRIPTION: str = "订单生产进度跟踪API"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # 数据库配置
    DATABASE_URL: str = "sqlite:///./dev.db"
    ECHO_SQL: bool = False  # 是否打印SQL日志

    # JWT配置
    SECRET_KEY: str = "your-secret-key-here"  # 生产环境中通过环境变量设置
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 720

    # 访问 PIN，为空时不启用（管理员操作无需令牌）
    ACCESS_PIN: str = ""

    # 跟踪规则
    READY_RETENTION_DAYS: int = 7  # 待交付超过该天数后不再出现在完成列表
    LEGACY_MAX_STEP: int = 10  # 未设置工序数时允许的最大工序号

    # 包装完成通知，NOTIFY_API_KEY 为空时不发送
    NOTIFY_API_KEY: str = ""
    NOTIFY_API_URL: str = "https://api.resend.com/emails"
    NOTIFY_FROM: str = "noreply@example.com"
    NOTIFY_TO: str = ""  # 逗号分隔
    NOTIFY_TIMEOUT_SECONDS: float = 10.0


# 创建全局配置实例
settings = Settings()
