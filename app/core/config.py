# app/core/config.py
# 應用程式設定 (例如資料庫連線字串、JWT 秘鑰等)
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # 資料庫設定
    DATABASE_URL: str
    # (可選) 設為 True 會在 console 印出 SQL 語句
    DB_ECHO: bool = False

    # JWT 設定
    JWT_SECRET_KEY: str
    # JWT 演算法
    JWT_ALGORITHM: str = "HS256"
    # 存取令牌過期時間（分鐘）
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    # 刷新令牌過期時間（天）
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # 日誌等級
    LOG_LEVEL: str = "INFO"

    # 分頁預設值 / 上限
    PAGINATION_DEFAULT_LIMIT: int = 20
    PAGINATION_MAX_LIMIT: int = 100

    # 媒合：每次最多評分的候選數，以及列入結果的最低分數 (0 ~ 100)
    MATCHING_POOL_SIZE: int = 100
    MATCHING_MIN_SCORE: int = 30

    # API Client (app/client) 使用
    API_BASE_URL: str = "http://localhost:8000"
    API_TIMEOUT_SECONDS: float = 30.0

    # 環境變數檔案 
    class Config:
        env_file = ".env"

# 建立設定實例
settings = Settings()
