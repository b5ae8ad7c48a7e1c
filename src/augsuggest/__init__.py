"""augsuggest package root."""

from augsuggest.config import SuggestConfig
from augsuggest.engine import RunResult, SuggestRun, suggest
from augsuggest.model import Leaf

__all__ = ["__version__", "Leaf", "RunResult", "SuggestConfig", "SuggestRun", "suggest"]

__version__ = "0.1.0"
