from .anthropic_model import AnthropicTagModel
from .base import TagModel
from .ollama_model import OllamaTagModel, ensure_valid_url
from .openai_models import OpenAIChatTagModel, OpenAIResponsesTagModel

__all__ = [
    "AnthropicTagModel",
    "OllamaTagModel",
    "OpenAIChatTagModel",
    "OpenAIResponsesTagModel",
    "TagModel",
    "ensure_valid_url",
]
