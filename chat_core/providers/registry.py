"""Provider 与模型配置。

集中维护 OpenAI 兼容端点的默认地址与可选模型列表。
模型 ID 直接发给 API；label 仅用于界面展示。
客户端也接受列表外的模型 ID，便于对接兼容 OpenAI 协议的其他服务。"""

from dataclasses import dataclass
from typing import Dict, Optional

from chat_core.config.settings import DEFAULT_API_URL


@dataclass(frozen=True)
class ModelConfig:
    """单个模型的展示配置。"""

    model_id: str
    label: str


@dataclass(frozen=True)
class ProviderConfig:
    """某个 Provider 的整体配置。"""

    name: str
    api_url: str
    default_temperature: float
    models: Dict[str, ModelConfig]


def _models(*pairs) -> Dict[str, ModelConfig]:
    return {model_id: ModelConfig(model_id=model_id, label=label) for model_id, label in pairs}


OPENAI_CONFIG = ProviderConfig(
    name="openai",
    api_url=DEFAULT_API_URL,
    default_temperature=0.5,
    models=_models(
        ("gpt-4.5-preview", "GPT-4.5 Preview"),
        ("gpt-4o", "GPT-4o"),
        ("gpt-4o-mini", "GPT-4o mini"),
        ("gpt-4-turbo", "GPT-4 Turbo"),
        ("gpt-4.5-preview-2025-02-27", "GPT-4.5 Preview 2025-02-27"),
        ("gpt-4-0125-preview", "GPT-4 0125 Preview"),
        ("gpt-4-turbo-preview", "GPT-4 Turbo Preview"),
        ("gpt-3.5-turbo-1106", "GPT-3.5 Turbo 1106"),
        ("gpt-4", "GPT-4"),
        ("gpt-3.5-turbo", "GPT-3.5 Turbo"),
    ),
)


def get_model_label(model_id: str) -> Optional[str]:
    """返回模型的展示名称，未登记的模型返回 None。"""

    cfg = OPENAI_CONFIG.models.get(model_id)
    return cfg.label if cfg else None
