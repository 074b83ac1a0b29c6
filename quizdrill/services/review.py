"""Annotated transcript of an exam, shared by finish and history lookups."""
from typing import Iterable, List

from quizdrill.services.question_bank import QuestionBank
from quizdrill.services.scoring import resolve_latest


def build_review(question_refs: Iterable, answer_log: Iterable, bank: QuestionBank,
                 languages: Iterable[str]) -> List[dict]:
    """One item per QuestionRef, in presentation order.

    The effective answer is the latest record per question; an unanswered
    question has an empty selection and ``was_correct`` False. Refs whose
    question has disappeared from the bank are skipped.
    """
    languages = list(languages)
    refs = sorted(question_refs, key=lambda ref: ref.position)
    latest = resolve_latest(answer_log)
    questions = bank.get_many(ref.question_id for ref in refs)

    items = []
    for ref in refs:
        question = questions.get(ref.question_id)
        if question is None:
            continue
        record = latest.get(ref.question_id)
        items.append({
            "question_id": question.id,
            "question_text": question.text_en,
            "selected_keys": list(record.selected_keys) if record else [],
            "correct_keys": sorted(bank.correct_keys(question.id)),
            "explanations_by_language": bank.explanations_by_language(question.id, languages),
            "was_correct": bool(record.is_correct) if record else False,
        })
    return items
