from .catalog import CATEGORY_INFO, CategoryExample, CategoryInfo, ExampleStep, get_category_info
from .evaluator import is_correct, parse_answer
from .registry import check_answer, generate_problem, generate_problems, get_all_categories
from .schema import Problem, ProblemCategory

__all__ = [
    "CATEGORY_INFO",
    "CategoryExample",
    "CategoryInfo",
    "ExampleStep",
    "Problem",
    "ProblemCategory",
    "check_answer",
    "generate_problem",
    "generate_problems",
    "get_all_categories",
    "get_category_info",
    "is_correct",
    "parse_answer",
]
