"""配置管理模块。

支持从环境变量、.env 以及 config.yaml 加载配置。
客户端只在构造时读取一次配置，核心逻辑不直接访问全局 settings。
"""

import os
import warnings
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_API_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-3.5-turbo"


def _load_config_from_yaml() -> Dict[str, Any]:
    """从 config.yaml 加载配置（若存在）。"""
    candidates = []
    explicit = os.getenv("CHAT_CONFIG_FILE")
    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.extend([
        Path.cwd() / "config.yaml",
        Path(__file__).resolve().parents[2] / "config.yaml",
    ])

    seen: set[Path] = set()
    for path in candidates:
        if path in seen:
            continue
        seen.add(path)
        try:
            if path.exists():
                data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
                if isinstance(data, dict):
                    return data
                warnings.warn(f"Config file {path} is not a mapping, ignored")
        except (OSError, yaml.YAMLError) as exc:
            warnings.warn(f"Failed to read config file {path}: {exc}")
    return {}


class ChatSettings(BaseSettings):
    """客户端配置（使用 Pydantic）。"""

    # ---- OpenAI 兼容端点 ----
    openai_api_url: str = Field(default=DEFAULT_API_URL, description="chat/completions 完整 URL")
    openai_api_token: Optional[str] = Field(default=None, description="API 密钥")
    openai_selected_model: str = Field(default=DEFAULT_MODEL, description="模型 ID")
    openai_streaming_enabled: bool = Field(default=False, description="是否使用流式响应")
    temperature: float = Field(default=0.5, ge=0.0, le=2.0, description="生成温度")

    # ---- 网络 ----
    proxy_host: Optional[str] = Field(default=None, description="代理主机")
    proxy_port: Optional[int] = Field(default=None, ge=1, le=65535, description="代理端口")
    http_timeout: Optional[float] = Field(
        default=None,
        gt=0.0,
        description="整个请求的超时时间（秒），为空表示不限制",
    )

    # ---- 日志 ----
    log_dir: str = Field(default="logs", description="日志目录")
    log_redact_content: bool = Field(default=False, description="是否截断日志内容")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @staticmethod
    def _config_source() -> Dict[str, Any]:
        return _load_config_from_yaml()

    @field_validator("openai_api_url", mode="before")
    @classmethod
    def default_api_url(cls, v: Any) -> Any:
        return v or DEFAULT_API_URL

    @field_validator("openai_selected_model", mode="before")
    @classmethod
    def default_model(cls, v: Any) -> Any:
        return v or DEFAULT_MODEL

    @field_validator("openai_api_token")
    @classmethod
    def validate_api_key(cls, v: Optional[str]) -> Optional[str]:
        if v and len(v) < 10:
            raise ValueError("API key seems too short")
        return v

    @property
    def proxy_url(self) -> Optional[str]:
        """代理地址，仅当 host 与 port 都配置时生效。"""
        if self.proxy_host and self.proxy_port:
            return f"http://{self.proxy_host}:{self.proxy_port}"
        return None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            cls._config_source,
            file_secret_settings,
        )


settings = ChatSettings()

Settings = ChatSettings
