"""Configuration management for ClipCheck"""

from typing import Optional, List
from pathlib import Path
import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class InferenceConfig(BaseModel):
    """Local inference server configuration"""
    base_url: str = "http://127.0.0.1:8080/v1"
    model: str = "phi-3.5"
    api_key: str = "no-key"  # llama.cpp ignores the key but the SDK requires one
    temperature: float = 0.2
    top_k: int = 50
    top_p: float = 0.95
    max_tokens: Optional[int] = None
    timeout: float = 60.0  # Seconds per inference call


class PipelineConfig(BaseModel):
    """Agent pipeline configuration"""
    max_text_length: int = 5000
    max_specialists: int = 3


class MemoryConfig(BaseModel):
    """Memory guard configuration"""
    critical_threshold_mb: int = 500
    warning_message: str = (
        "System memory is very low. Analysis may fail. You can try closing "
        "other applications first, or continue anyway."
    )
    failure_message: str = (
        "Analysis failed. Your system is currently low on memory which might "
        "be the cause. Try closing some other applications and try again."
    )

    @property
    def critical_threshold_bytes(self) -> int:
        return self.critical_threshold_mb * 1024 * 1024


class LoggingConfig(BaseModel):
    """Logging configuration"""
    level: str = "INFO"
    format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class ApiConfig(BaseModel):
    """HTTP API configuration"""
    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:3000"])


class Settings(BaseSettings):
    """Environment overrides (CLIPCHECK_* variables or .env)"""
    model_config = SettingsConfigDict(env_prefix="CLIPCHECK_", extra="ignore")

    config_path: str = "config.yaml"
    inference_base_url: Optional[str] = None
    inference_model: Optional[str] = None
    log_level: Optional[str] = None


class Config(BaseModel):
    """Main configuration"""
    inference: InferenceConfig = Field(default_factory=InferenceConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    memory: MemoryConfig = Field(default_factory=MemoryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)

    @classmethod
    def from_yaml(cls, config_path: str = "config.yaml") -> "Config":
        """Load configuration from YAML file"""
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_file, 'r') as f:
            config_data = yaml.safe_load(f) or {}

        return cls(**config_data)

    def apply_settings(self, settings: Settings) -> "Config":
        """
        Apply environment overrides on top of file configuration.

        Args:
            settings: Parsed environment settings

        Returns:
            This config, updated in place
        """
        if settings.inference_base_url:
            self.inference.base_url = settings.inference_base_url
        if settings.inference_model:
            self.inference.model = settings.inference_model
        if settings.log_level:
            self.logging.level = settings.log_level.upper()
        return self


# Global config instance
_config: Optional[Config] = None


def load_config(config_path: Optional[str] = None) -> Config:
    """Read config file (if present) and apply environment overrides"""
    settings = Settings()
    path = config_path or settings.config_path

    if Path(path).exists():
        config = Config.from_yaml(path)
    elif config_path is not None:
        raise FileNotFoundError(f"Configuration file not found: {config_path}")
    else:
        # No file at the default location: run on built-in defaults
        config = Config()

    return config.apply_settings(settings)


def get_config(config_path: Optional[str] = None) -> Config:
    """Get or create global configuration instance"""
    global _config
    if _config is None:
        _config = load_config(config_path)
    return _config


def reload_config(config_path: Optional[str] = None) -> Config:
    """Reload configuration from file"""
    global _config
    _config = load_config(config_path)
    return _config
