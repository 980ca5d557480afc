from .evaluator import evaluate, new_id
from .memory import Memory

__all__ = ["Memory", "evaluate", "new_id"]
