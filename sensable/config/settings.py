"""Configuration management for the sensable scheduler."""
import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv


# Project root directory (parent of sensable/)
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


class Config:
    """
    Configuration class for the sensable scheduler.
    Loads settings from environment variables and provides singleton access.
    """
    _instance: Optional['Config'] = None

    def __new__(cls):
        """Singleton pattern - only one instance of Config exists."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize configuration from environment variables."""
        if self._initialized:
            return

        # Load .env file if it exists
        load_dotenv()

        # Database configuration
        database_path_env = os.getenv('DATABASE_PATH', 'data/sensable.db')
        self.database_path = self._resolve_path(database_path_env)
        self.database_url = os.getenv('DATABASE_URL', '') or f'sqlite:///{self.database_path}'
        self.database_schema = os.getenv('DB_SCHEMA') or None

        # Sensable API
        self.api_base_url = os.getenv('SENSABLE_API_URL', 'https://sensable.io').rstrip('/')
        self.http_timeout = int(os.getenv('HTTP_TIMEOUT_SECONDS', '30'))

        # Logging configuration
        log_dir_env = os.getenv('LOG_DIR', 'logs')
        self.log_dir = self._resolve_path(log_dir_env)
        self.log_level = os.getenv('LOG_LEVEL', 'INFO')
        self.log_max_bytes = int(os.getenv('LOG_MAX_BYTES', str(10 * 1024 * 1024)))
        self.log_backup_count = int(os.getenv('LOG_BACKUP_COUNT', '10'))

        # Ensure directories exist
        self.log_dir.mkdir(parents=True, exist_ok=True)
        if self.database_url.startswith('sqlite:///'):
            self.database_path.parent.mkdir(parents=True, exist_ok=True)

        self._initialized = True

        # Validate required configuration
        self._validate()

    def _resolve_path(self, path_str: str) -> Path:
        """
        Resolve a path string to an absolute Path.

        If the path is already absolute, returns it as-is.
        If relative, resolves it relative to PROJECT_ROOT.

        Args:
            path_str: Path string from environment variable

        Returns:
            Absolute Path object
        """
        path = Path(path_str)
        if path.is_absolute():
            return path
        return (PROJECT_ROOT / path).resolve()

    def _validate(self):
        """Validate configuration values."""
        if not self.api_base_url.startswith(('http://', 'https://')):
            raise ValueError("SENSABLE_API_URL must be an http(s) URL")
        if self.http_timeout <= 0:
            raise ValueError("HTTP_TIMEOUT_SECONDS must be positive")
        if self.log_max_bytes <= 0:
            raise ValueError("LOG_MAX_BYTES must be positive")
        if self.log_backup_count < 0:
            raise ValueError("LOG_BACKUP_COUNT must not be negative")

    @classmethod
    def get_instance(cls) -> 'Config':
        """
        Get the singleton instance of Config.

        Returns:
            Config instance
        """
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance


# Convenience function to get config instance
def get_config() -> Config:
    """
    Get the configuration instance.

    Returns:
        Config instance
    """
    return Config.get_instance()
