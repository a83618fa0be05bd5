"""
team_challenge.types — TypedDict schemas for external payloads
==============================================================

Documents the dict shapes exchanged with the question sources and the
feedback generator. Implementers of a custom FeedbackGenerator or
QuestionSource should reference these types:

    from team_challenge import FeedbackContext, FeedbackPayload

Use __annotations__ to inspect fields:

    >>> FeedbackPayload.__annotations__
    {'summary': str, 'strengths': List[str], 'weak_points': List[str], 'detailed_analysis': str}
"""

from typing import Any, Dict, List, Literal, TypedDict


# ============================================
# Question records
# ============================================

class QuestionPayload(TypedDict, total=False):
    """One question as stored in ``team_questions`` / ``current_question``.

    Fields
    ------
    id : str
    type : "single_choice" | "multi_choice" | "free_text"
        Aliases "input", "input-range" and "single-choice" are accepted.
    question : str
    options : list of str
        Empty for free text.
    correct_answer : int | list of int | str
    explanation : str
    image_path : str, optional
    answer_mode : "exact" | "numeric"
        Free-text matching mode. Defaults to "exact".
    tolerance : float
        Relative tolerance for numeric mode. Defaults to 0.02.
    owner_team_id : int
        Only on ``current_question``: team whose deck it came from.
    """
    id: str
    type: Literal["single_choice", "multi_choice", "free_text"]
    question: str
    options: List[str]
    correct_answer: Any
    explanation: str
    image_path: str
    answer_mode: Literal["exact", "numeric"]
    tolerance: float
    difficulty: str
    owner_team_id: int


# ============================================
# FeedbackGenerator.generate() Input/Output
# ============================================

class FeedbackContext(TypedDict):
    """Context passed to FeedbackGenerator.generate().

    Fields
    ------
    match_id : str
    scores : dict
        Team id (as string) -> final score, e.g. {"1": 4, "2": 6}.
    questions : dict
        Team id (as string) -> that team's deck of QuestionPayload.
    questions_per_team : int
    """
    match_id: str
    scores: Dict[str, int]
    questions: Dict[str, List[QuestionPayload]]
    questions_per_team: int


class FeedbackPayload(TypedDict):
    """Expected return from FeedbackGenerator.generate()."""
    summary: str
    strengths: List[str]
    weak_points: List[str]
    detailed_analysis: str
