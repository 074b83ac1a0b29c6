"""
Unit tests for question-bank ingestion
"""
import json

import pytest

from quizdrill.errors import Conflict, InvalidInput
from quizdrill.models import Explanation, Option, Question
from quizdrill.seed import ingest_questions, load_question_file, parse_questions, seed_if_empty


class TestSeed:
    """Test cases for bulk ingestion"""

    def test_accepts_list_and_wrapper(self, scenario_questions):
        assert len(parse_questions(scenario_questions)) == 2
        assert len(parse_questions({"questions": scenario_questions})) == 2

    def test_rejects_other_shapes(self):
        with pytest.raises(InvalidInput):
            parse_questions({"items": []})
        with pytest.raises(InvalidInput):
            parse_questions([{"id": "Q1"}])

    def test_empty_wrapper_ingests_nothing(self, db):
        items = parse_questions({"questions": []})
        assert items == []
        assert ingest_questions(db, items) == 0
        assert db.query(Question).count() == 0

    def test_ingest_normalizes_keys(self, scenario_bank):
        keys = {o.option_key for o in scenario_bank.query(Option).filter(Option.question_id == "Q1")}
        assert keys == {"a", "b", "c", "d"}
        correct = scenario_bank.query(Option).filter(Option.question_id == "Q1", Option.is_correct.is_(True)).all()
        assert [o.option_key for o in correct] == ["a"]

    def test_ingest_trims_urls(self, scenario_bank):
        explanation = scenario_bank.query(Explanation).filter(
            Explanation.question_id == "Q1", Explanation.option_key == "a", Explanation.lang == "en"
        ).one()
        assert explanation.url == "https://example.com/mars"

    def test_duplicate_ids_reject_whole_batch(self, db, scenario_questions):
        batch = parse_questions(scenario_questions + [scenario_questions[0]])
        with pytest.raises(InvalidInput) as exc_info:
            ingest_questions(db, batch)
        assert "Q1" in exc_info.value.detail
        assert db.query(Question).count() == 0

    def test_existing_ids_conflict(self, scenario_bank, scenario_questions):
        with pytest.raises(Conflict):
            ingest_questions(scenario_bank, parse_questions([scenario_questions[1]]))
        assert scenario_bank.query(Question).count() == 2

    def test_sequence_continues_after_existing(self, scenario_bank, scenario_questions):
        extra = dict(scenario_questions[0], id="Q3")
        ingest_questions(scenario_bank, parse_questions([extra]))
        assert scenario_bank.query(Question).filter(Question.id == "Q3").one().sequence == 3

    def test_seed_if_empty(self, db, tmp_path, scenario_questions):
        path = tmp_path / "questions.json"
        path.write_text(json.dumps({"questions": scenario_questions}), encoding="utf-8")

        assert seed_if_empty(db, str(path)) == 2
        assert seed_if_empty(db, str(path)) == 0

    def test_seed_missing_file(self, db, tmp_path):
        assert seed_if_empty(db, str(tmp_path / "missing.json")) == 0

    def test_load_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(InvalidInput):
            load_question_file(str(path))
