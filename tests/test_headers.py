import pytest

from records.headers import (
    HeaderCategory,
    classify_header,
    classify_with_slot,
    detail_kind,
    is_phone_header,
    rank_detail_keys,
    resolve_headers,
)


@pytest.mark.parametrize(
    "header, expected",
    [
        ("رقم الهاتف الجوال", HeaderCategory.PHONE),
        ("  Mobile Number ", HeaderCategory.PHONE),
        ("جوال ولي الأمر", HeaderCategory.PHONE),
        ("id", HeaderCategory.ID),
        ("ID", HeaderCategory.ID),
        ("الرقم التدريبي", HeaderCategory.ID),
        ("Trainee ID", HeaderCategory.ID),
        ("name", HeaderCategory.NAME),
        ("اسم المتدرب", HeaderCategory.NAME),
        ("Full Name", HeaderCategory.NAME),
        ("رمز المقرر", HeaderCategory.COURSE_CODE),
        ("إسم المقرر", HeaderCategory.COURSE_NAME),
        ("الوحدات المعتمدة للمقرر", HeaderCategory.COURSE_CREDITS),
        ("حالة المقرر/ مستوفى", HeaderCategory.COURSE_COMPLETED),
        ("فصل المقرر", HeaderCategory.COURSE_SEMESTER),
        ("القسم", HeaderCategory.DETAIL),
        ("المرشد الأكاديمي", HeaderCategory.DETAIL),
        ("عدد المقررات المطلوبة للبرنامج", HeaderCategory.DETAIL),
        ("عدد الوحدات المعتمده للبرنامج", HeaderCategory.DETAIL),
        ("Advisor Name", HeaderCategory.DETAIL),
        ("Valid", HeaderCategory.DETAIL),
        ("", HeaderCategory.DETAIL),
    ],
)
def test_classify_header(header, expected):
    assert classify_header(header) == expected


def test_classify_header_never_raises_on_odd_input():
    assert classify_header(None) == HeaderCategory.DETAIL
    assert classify_header(123) == HeaderCategory.DETAIL


def test_is_phone_header():
    assert is_phone_header("رقم الهاتف الجوال")
    assert is_phone_header("Phone")
    assert not is_phone_header("الرقم التدريبي")


@pytest.mark.parametrize(
    "header, expected",
    [
        ("اسم المقرر", (HeaderCategory.COURSE_NAME, 1)),
        ("اسم المقرر 2", (HeaderCategory.COURSE_NAME, 2)),
        ("اسم المقرر (3)", (HeaderCategory.COURSE_NAME, 3)),
        ("رمز المقرر__2", (HeaderCategory.COURSE_CODE, 2)),
        ("رمز المقرر.1", (HeaderCategory.COURSE_CODE, 2)),
        ("رقم الهاتف الجوال 2", (HeaderCategory.PHONE, None)),
        ("القسم", (HeaderCategory.DETAIL, None)),
    ],
)
def test_course_slot_suffixes(header, expected):
    assert classify_with_slot(header) == expected


def test_resolve_headers_groups_course_slots():
    hmap = resolve_headers([
        "id", "name", "القسم",
        "رمز المقرر 1", "اسم المقرر 1",
        "رمز المقرر 2", "اسم المقرر 2", "حالة المقرر 2",
    ])

    assert hmap.id_headers == ["id"]
    assert hmap.name_headers == ["name"]
    assert hmap.category("القسم") == HeaderCategory.DETAIL
    assert hmap.course_slots == {
        1: {"code": "رمز المقرر 1", "name": "اسم المقرر 1"},
        2: {"code": "رمز المقرر 2", "name": "اسم المقرر 2", "completed": "حالة المقرر 2"},
    }


def test_resolve_headers_second_course_column_for_same_slot_is_detail():
    hmap = resolve_headers(["اسم المقرر", "Course Name"])

    assert hmap.category("اسم المقرر") == HeaderCategory.COURSE_NAME
    assert hmap.category("Course Name") == HeaderCategory.DETAIL
    assert hmap.course_slots == {1: {"name": "اسم المقرر"}}


def test_resolve_headers_keeps_several_phone_columns():
    hmap = resolve_headers(["id", "جوال المتدرب", "هاتف المنزل"])

    assert hmap.category("جوال المتدرب") == HeaderCategory.PHONE
    assert hmap.category("هاتف المنزل") == HeaderCategory.PHONE
    assert hmap.course_slots == {}


@pytest.mark.parametrize(
    "headers",
    [
        ["اسم المقرر", "Course Name"],
        ["Course Name", "اسم المقرر"],
    ],
)
def test_competing_course_columns_resolve_the_same_in_any_order(headers):
    hmap = resolve_headers(headers)

    assert hmap.course_slots == {1: {"name": "اسم المقرر"}}
    assert hmap.category("Course Name") == HeaderCategory.DETAIL


def test_competing_slot_suffixes_pick_the_same_column_in_any_order():
    headers = ["رمز المقرر 2", "رمز المقرر.1"]

    assert resolve_headers(headers).course_slots == resolve_headers(list(reversed(headers))).course_slots
    assert resolve_headers(headers).course_slots == {2: {"code": "رمز المقرر 2"}}


def test_id_columns_are_ranked_by_keyword_not_position():
    assert resolve_headers(["رقم المتدرب", "الرقم التدريبي", "id"]).id_headers == [
        "الرقم التدريبي", "رقم المتدرب", "id",
    ]
    assert resolve_headers(["id", "رقم المتدرب", "الرقم التدريبي"]).id_headers == [
        "الرقم التدريبي", "رقم المتدرب", "id",
    ]


def test_rank_detail_keys_uses_report_order_then_encounter_order():
    keys = ["ملاحظات", "المعدل التراكمي", "القسم", "رقم الهاتف الجوال ", "البريد"]

    assert rank_detail_keys(keys) == ["القسم", "رقم الهاتف الجوال ", "المعدل التراكمي", "ملاحظات", "البريد"]


def test_rank_detail_keys_substring_and_custom_order():
    assert rank_detail_keys(["b", "a", "c"], preferred=["c", "a"]) == ["c", "a", "b"]
    assert rank_detail_keys(["x", "اسم القسم العلمي"], preferred=["القسم"]) == ["اسم القسم العلمي", "x"]


def test_rank_detail_keys_is_stable():
    keys = ["وصف المستوى", "z", "التخصص", "y"]
    assert rank_detail_keys(keys) == rank_detail_keys(list(keys))
    assert rank_detail_keys(keys) == ["التخصص", "وصف المستوى", "z", "y"]


def test_detail_kind():
    assert detail_kind("رقم الهاتف الجوال") == "phone"
    assert detail_kind("المعدل التراكمي") == "gpa"
    assert detail_kind("المرشد الأكاديمي") == "advisor"
    assert detail_kind("ملاحظات") == "other"
