import pytest

SH06_HEADERS = [
    "الرقم التدريبي",
    "اسم المتدرب",
    "القسم",
    "رقم الهاتف الجوال",
    "رمز المقرر",
    "إسم المقرر",
    "الوحدات المعتمدة للمقرر",
    "حالة المقرر/ مستوفى",
]


@pytest.fixture
def sh06_headers():
    return list(SH06_HEADERS)


@pytest.fixture
def sh06_rows():
    # one row per course, as the SH06 export lists them
    return [
        {
            "الرقم التدريبي": 423901.0,
            "اسم المتدرب": " أحمد علي ",
            "القسم": "التقنية الميكانيكية",
            "رقم الهاتف الجوال": "0558112233",
            "رمز المقرر": "ENG 101",
            "إسم المقرر": "لغة إنجليزية",
            "الوحدات المعتمدة للمقرر": 3,
            "حالة المقرر/ مستوفى": "نعم",
        },
        {
            "الرقم التدريبي": "423901",
            "اسم المتدرب": "أحمد علي",
            "القسم": "التقنية الميكانيكية",
            "رقم الهاتف الجوال": "0558112233",
            "رمز المقرر": "MEC 201",
            "إسم المقرر": "ميكانيكا",
            "الوحدات المعتمدة للمقرر": 4,
            "حالة المقرر/ مستوفى": "لا",
        },
        {
            "الرقم التدريبي": "",
            "اسم المتدرب": "بدون رقم",
            "القسم": "التقنية الميكانيكية",
            "رقم الهاتف الجوال": "0550000000",
            "رمز المقرر": "ENG 101",
            "إسم المقرر": "لغة إنجليزية",
            "الوحدات المعتمدة للمقرر": 3,
            "حالة المقرر/ مستوفى": "نعم",
        },
        {
            "الرقم التدريبي": "423902",
            "اسم المتدرب": "سالم",
            "القسم": "التقنية الميكانيكية",
            "رقم الهاتف الجوال": "0559112233",
            "رمز المقرر": "",
            "إسم المقرر": "",
            "الوحدات المعتمدة للمقرر": None,
            "حالة المقرر/ مستوفى": None,
        },
    ]


@pytest.fixture
def scenario_rows():
    return [
        {"id": "423901", "name": "أحمد", "رقم الهاتف الجوال": "558112233"},
        {"id": "423902", "name": "سالم", "رقم الهاتف الجوال": "559112233"},
    ]
