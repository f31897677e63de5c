import logging

import pytest

from records.errors import InvalidQuery
from records.models import CourseRecord, TraineeProfile
from records.normalize import normalize_rows
from records.query import find_trainee, match_reason, sort_courses


@pytest.fixture
def scenario(scenario_rows):
    return normalize_rows(scenario_rows)


def test_phone_id_and_missing_lookups(scenario):
    assert find_trainee(scenario, "558").id == "423901"
    assert find_trainee(scenario, "423902").id == "423902"
    assert find_trainee(scenario, "999") is None


def test_every_profile_is_found_by_its_id(sh06_rows, sh06_headers):
    profiles = normalize_rows(sh06_rows, sh06_headers)
    for p in profiles:
        assert find_trainee(profiles, p.id) is p


def test_partial_name(scenario):
    assert find_trainee(scenario, "سال").id == "423902"
    assert find_trainee(scenario, "أحمد").id == "423901"


def test_first_match_in_collection_order_wins():
    profiles = [
        TraineeProfile(id="100", name="عبدالله 200"),
        TraineeProfile(id="200", name="خالد"),
    ]
    # the later exact id does not outrank an earlier name match
    assert find_trainee(profiles, "200").id == "100"
    assert find_trainee(list(reversed(profiles)), "200").id == "200"


def test_name_match_is_case_sensitive():
    profiles = [TraineeProfile(id="1", name="John Smith")]
    assert find_trainee(profiles, "john") is None
    assert find_trainee(profiles, "John").id == "1"


def test_only_phone_like_details_are_searched():
    profiles = [TraineeProfile(id="1", name="x", details={"ملاحظات": "558", "المعدل التراكمي": 4.558})]
    assert find_trainee(profiles, "558") is None


def test_numeric_phone_values_are_searched():
    profiles = [TraineeProfile(id="1", name="x", details={"Mobile": 558112233})]
    assert find_trainee(profiles, "5581").id == "1"


def test_query_is_trimmed(scenario):
    assert find_trainee(scenario, "  423901 ").id == "423901"


@pytest.mark.parametrize("bad", ["", "   ", "\t\n", None, 423901])
def test_invalid_query_is_rejected(scenario, bad):
    with pytest.raises(InvalidQuery):
        find_trainee(scenario, bad)


def test_invalid_query_is_rejected_even_for_empty_collection():
    with pytest.raises(InvalidQuery):
        find_trainee([], " ")


def test_match_reason(scenario):
    first = scenario[0]
    assert match_reason(first, "423901") == "id"
    assert match_reason(first, "أح") == "name"
    assert match_reason(first, "8112") == "phone"
    assert match_reason(first, "999") is None


def test_search_does_not_change_collection(scenario):
    before = [p.to_dict() for p in scenario]
    find_trainee(scenario, "558")
    find_trainee(scenario, "999")
    assert [p.to_dict() for p in scenario] == before


def test_sort_courses_by_semester_keeps_stored_order():
    a = CourseRecord(course_name="a", semester="1445-2")
    b = CourseRecord(course_name="b", semester="1444-1")
    c = CourseRecord(course_name="c")
    d = CourseRecord(course_name="d", semester="1444-1")
    courses = [a, b, c, d]

    assert [x.course_name for x in sort_courses(courses)] == ["b", "d", "a", "c"]
    assert courses == [a, b, c, d]

    p = TraineeProfile(id="1", courses=courses)
    assert [x.course_name for x in p.sorted_courses()] == ["b", "d", "a", "c"]
    assert p.courses == [a, b, c, d]


def test_search_terms_stay_out_of_info_logs(scenario, caplog):
    with caplog.at_level(logging.INFO, logger="records.query"):
        assert find_trainee(scenario, "0599887766") is None

    assert "0599887766" not in caplog.text


def test_phone_match_uses_every_phone_column():
    p = TraineeProfile(id="1", name="x", details={"جوال المتدرب": "0501112222", "هاتف ولي الأمر": "0553334444"})

    assert p.phone_numbers() == ["0501112222", "0553334444"]
    assert match_reason(p, "3334") == "phone"
