"""LLM chains: shared machinery plus the analysis, generation and scout passes."""

from vibecard.chains.base import Chain, ChainSpec
from vibecard.chains.parsing import ParseOutcome, parse_model_output, strip_code_fences
from vibecard.chains.scout import Scout

__all__: list[str] = [
    "Chain",
    "ChainSpec",
    "ParseOutcome",
    "Scout",
    "parse_model_output",
    "strip_code_fences",
]
