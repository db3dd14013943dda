from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    GEOJSON_BASE_URL: str = ""       # 설정 시 HTTP로 {base}/{level}.geojson 로드
    GEOJSON_DIR: str = "data"        # 미설정 시 로컬 디렉터리에서 로드
    PRELOAD_DATA: bool = True
    LOG_LEVEL: str = "INFO"
    PORT: int = 8000

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
