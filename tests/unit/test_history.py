"""
Unit tests for exam history
"""
from datetime import datetime, timedelta

import pytest
import pytz

from quizdrill.errors import Forbidden, NotFound
from quizdrill.models import Exam
from quizdrill.services.exam_session import ExamSessionService
from quizdrill.services.history import clamp_page, get_detail, list_sessions

BASE_TIME = datetime(2026, 1, 1, 9, 0, tzinfo=pytz.UTC)


def _start_exams(db, settings, owner_id, how_many):
    """Start exams one hour apart; returns ids oldest first"""
    service = ExamSessionService(db, settings)
    ids = []
    for i in range(how_many):
        exam_id = service.start(count=1 + i % 2, owner_id=owner_id)["exam_id"]
        exam = db.query(Exam).filter(Exam.id == exam_id).one()
        exam.started_at = BASE_TIME + timedelta(hours=i)
        db.commit()
        ids.append(exam_id)
    return ids


class TestClampPage:
    """Test cases for paging normalization"""

    def test_defaults(self, test_settings):
        assert clamp_page(None, None, test_settings) == (20, 0)

    def test_invalid_values_fall_back(self, test_settings):
        assert clamp_page(0, -3, test_settings) == (20, 0)
        assert clamp_page(-1, 5, test_settings) == (20, 5)

    def test_limit_capped(self, test_settings):
        assert clamp_page(1000, 0, test_settings) == (100, 0)

    def test_valid_values_kept(self, test_settings):
        assert clamp_page(7, 14, test_settings) == (7, 14)


class TestListSessions:
    """Test cases for list_sessions"""

    def test_newest_first(self, scenario_bank, test_settings, user):
        ids = _start_exams(scenario_bank, test_settings, user.id, 3)

        page = list_sessions(scenario_bank, user.id, config=test_settings)

        assert page["total"] == 3
        assert [item["id"] for item in page["items"]] == list(reversed(ids))

    def test_summary_fields(self, scenario_bank, test_settings, user):
        ids = _start_exams(scenario_bank, test_settings, user.id, 2)
        service = ExamSessionService(scenario_bank, test_settings)
        service.submit_answer(ids[1], "Q1", ["a"])
        service.submit_answer(ids[1], "Q2", ["a", "c"])
        service.finish(ids[1])

        items = {item["id"]: item for item in list_sessions(scenario_bank, user.id, config=test_settings)["items"]}

        unfinished = items[ids[0]]
        assert unfinished["finished_at"] is None
        assert unfinished["score_percent"] is None
        assert unfinished["passed"] is None
        assert unfinished["question_count"] == 1
        assert unfinished["started_at"] == BASE_TIME
        assert unfinished["started_at"].tzinfo is not None

        finished = items[ids[1]]
        assert finished["score_percent"] == 100.0
        assert finished["passed"] is True
        assert finished["question_count"] == 2
        assert finished["duration_sec"] == 10800

    def test_paging(self, scenario_bank, test_settings, user):
        ids = _start_exams(scenario_bank, test_settings, user.id, 5)

        page = list_sessions(scenario_bank, user.id, limit=2, offset=1, config=test_settings)

        assert page["limit"] == 2
        assert page["offset"] == 1
        assert page["total"] == 5
        assert [item["id"] for item in page["items"]] == [ids[3], ids[2]]

    def test_only_own_exams(self, scenario_bank, test_settings, user, other_user):
        _start_exams(scenario_bank, test_settings, user.id, 2)
        _start_exams(scenario_bank, test_settings, other_user.id, 1)
        ExamSessionService(scenario_bank, test_settings).start(count=1)

        assert list_sessions(scenario_bank, user.id, config=test_settings)["total"] == 2
        assert list_sessions(scenario_bank, other_user.id, config=test_settings)["total"] == 1

    def test_no_exams(self, db, test_settings, user):
        page = list_sessions(db, user.id, config=test_settings)
        assert page["total"] == 0
        assert page["items"] == []


class TestGetDetail:
    """Test cases for get_detail"""

    def test_detail_for_owner(self, scenario_bank, test_settings, user):
        service = ExamSessionService(scenario_bank, test_settings)
        exam_id = service.start(count=2, owner_id=user.id)["exam_id"]
        service.submit_answer(exam_id, "Q1", ["a"])
        finished = service.finish(exam_id)

        detail = get_detail(scenario_bank, exam_id, user.id, test_settings)

        assert detail["exam_id"] == exam_id
        assert detail["score_percent"] == 50.0
        assert detail["passed"] is False
        assert detail["correct_count"] == 1
        assert detail["wrong_count"] == 1
        assert detail["review_items"] == finished["review_items"]

    def test_other_identity_forbidden(self, scenario_bank, test_settings, user, other_user):
        exam_id = ExamSessionService(scenario_bank, test_settings).start(count=1, owner_id=user.id)["exam_id"]
        with pytest.raises(Forbidden):
            get_detail(scenario_bank, exam_id, other_user.id, test_settings)

    def test_anonymous_exam_forbidden(self, scenario_bank, test_settings, user):
        exam_id = ExamSessionService(scenario_bank, test_settings).start(count=1)["exam_id"]
        with pytest.raises(Forbidden):
            get_detail(scenario_bank, exam_id, user.id, test_settings)

    def test_unknown_exam(self, scenario_bank, test_settings, user):
        with pytest.raises(NotFound):
            get_detail(scenario_bank, "missing", user.id, test_settings)
