"""Domain-specific calculation helpers."""

from .clt import calculate_clt
from .comparison import compare_models
from .pj import calculate_pj
from .progressive import evaluate_bracket_table, select_bracket
from .utils import format_percentage, round_currency, round_rate

__all__ = [
    "calculate_clt",
    "calculate_pj",
    "compare_models",
    "evaluate_bracket_table",
    "format_percentage",
    "round_currency",
    "round_rate",
    "select_bracket",
]
