from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/docdecl.log"

    # Base directory for relative document labels
    OUTPUT_DIR: str = "."

    # Treat every document as if it carried the keepopen flag: emit, never save
    KEEP_OPEN: bool = False

    # Reject misplaced children instead of skipping them
    STRICT_STRUCTURE: bool = False

    @property
    def output_path(self) -> Path:
        return Path(self.OUTPUT_DIR)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
