"""
One-question-at-a-time quiz state machine.

States are AwaitingAnswer(i) for 0 <= i < N and Complete. Answers can be
changed freely while awaiting; scoring happens exactly once, on submit.
"""
import logging
from typing import Dict, List, Optional

from errors import InputValidationError, UnansweredQuestionsError
from schemas import QuestionFeedback, QuestionView, QuizQuestion, QuizResult, QuizState

logger = logging.getLogger(__name__)


def feedback_explanation(question: QuizQuestion, selected: int) -> str:
    if selected == question.correct_answer:
        return question.explanation
    # wrongExplanations skips the correct option, so positions after it shift down by one
    idx = selected - 1 if selected > question.correct_answer else selected
    if 0 <= idx < len(question.wrong_explanations):
        return question.wrong_explanations[idx]
    return ""


def score_answers(questions: List[QuizQuestion], answers: Dict[int, Optional[int]]) -> QuizResult:
    if len(answers) != len(questions):
        raise InputValidationError("Answer count does not match question count")
    remaining = sum(1 for i in range(len(questions)) if answers.get(i) is None)
    if remaining:
        raise UnansweredQuestionsError(remaining)

    feedback = []
    for i, q in enumerate(questions):
        selected = answers[i]
        feedback.append(QuestionFeedback(
            question_index=i,
            selected_answer=selected,
            correct_answer=q.correct_answer,
            is_correct=selected == q.correct_answer,
            explanation=feedback_explanation(q, selected),
        ))

    return QuizResult(
        score=sum(1 for f in feedback if f.is_correct),
        total_questions=len(questions),
        answers=dict(answers),
        feedback=feedback,
        questions=list(questions),
    )


class QuizRunner:
    def __init__(self, questions: List[QuizQuestion]):
        if not questions:
            raise InputValidationError("No questions generated")
        self.questions = list(questions)
        self.current = 0
        self.answers: Dict[int, Optional[int]] = {i: None for i in range(len(self.questions))}
        self.result: Optional[QuizResult] = None

    @property
    def complete(self) -> bool:
        return self.result is not None

    @property
    def state(self) -> QuizState:
        return QuizState(complete=self.complete, index=self.current)

    @property
    def answered(self) -> int:
        return sum(1 for a in self.answers.values() if a is not None)

    @property
    def remaining(self) -> int:
        return len(self.questions) - self.answered

    def current_view(self) -> QuestionView:
        q = self.questions[self.current]
        return QuestionView(index=self.current, question=q.question, options=list(q.options))

    def _ensure_open(self):
        if self.complete:
            raise InputValidationError("Quiz already submitted")

    def answer(self, choice: int, index: Optional[int] = None) -> None:
        self._ensure_open()
        index = self.current if index is None else index
        if not 0 <= index < len(self.questions):
            raise InputValidationError(f"No question at index {index}")
        if not 0 <= choice < len(self.questions[index].options):
            raise InputValidationError(f"Invalid option {choice} for question {index + 1}")
        self.answers[index] = choice

    def next(self) -> QuizState:
        self._ensure_open()
        if self.answers[self.current] is None:
            raise InputValidationError("Please select an answer before continuing")
        if self.current == len(self.questions) - 1:
            self.submit()
        else:
            self.current += 1
        return self.state

    def previous(self) -> QuizState:
        self._ensure_open()
        if self.current > 0:
            self.current -= 1
        return self.state

    def submit(self) -> QuizResult:
        self._ensure_open()
        self.result = score_answers(self.questions, self.answers)
        logger.info(f"Quiz scored {self.result.score}/{self.result.total_questions}")
        return self.result
