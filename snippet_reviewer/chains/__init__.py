"""模型调用与评审流程"""

from .inference import InferenceClient, create_chat_model
from .review_chain import ReviewOrchestrator, create_orchestrator, setup_debug_logging

__all__ = [
    "InferenceClient",
    "ReviewOrchestrator",
    "create_chat_model",
    "create_orchestrator",
    "setup_debug_logging",
]
