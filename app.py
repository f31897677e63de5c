from __future__ import annotations
import logging
import hmac
import streamlit as st
import pandas as pd
from records.errors import EmptyBatch, InvalidQuery, RowSourceError, StoreUnavailable
from records.headers import detail_kind
from records.ingest import load_table_from_upload
from records.models import TraineeProfile
from records.query import find_trainee
from records.service import load_profiles, publish_upload
from records.store import JsonProfileStore
from records.utils import SUPERVISOR_PASSWORD

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

st.set_page_config(page_title="نظام السجل التدريبي", layout="wide")
st.title("نظام السجل التدريبي")
st.caption("الكلية التقنية بالطائف - قسم التقنية الميكانيكية")
# =========================

# Messages
# =========================
MSG_EMPTY_UPLOAD = "لم يتم العثور على بيانات صالحة في الملف. تأكد من وجود أعمدة (الرقم، الاسم) وبيانات صحيحة."
MSG_NOT_FOUND = "لم يتم العثور على بيانات تطابق البحث (رقم تدريبي، اسم، أو جوال)."
MSG_STORE_DOWN = "تعذر الاتصال بقاعدة البيانات. البيانات السابقة ما زالت محفوظة، يرجى المحاولة مرة أخرى."
MSG_BAD_FILE = "تعذر قراءة الملف. تأكد من أنه ملف Excel أو CSV صالح."
MSG_UPLOADED = "تم رفع البيانات وحفظها في السيرفر بنجاح."

KIND_ICONS = {
    "phone": "📱",
    "department": "🏢",
    "gpa": "🏅",
    "semester": "📅",
    "credits": "#️⃣",
    "status": "👤",
    "advisor": "👤",
    "other": "ℹ️",
}

store = JsonProfileStore()
# =========================

# Session state: one working copy of the collection
# =========================
if "trainees" not in st.session_state:
    try:
        st.session_state["trainees"] = load_profiles(store)
        st.session_state["server_ok"] = True
    except StoreUnavailable:
        st.session_state["trainees"] = []
        st.session_state["server_ok"] = False

st.session_state.setdefault("supervisor", False)
st.session_state.setdefault("current", None)

trainees: list[TraineeProfile] = st.session_state["trainees"]
# =========================

# Helpers
# =========================
def _courses_frame(profile: TraineeProfile) -> pd.DataFrame:
    rows = []
    for c in profile.sorted_courses():
        name = c.course_name
        if c.is_project:
            name = f"{name} (غير محسوب ضمن الخطة حالياً)"
        rows.append({
            "رمز المقرر": c.course_code or "-",
            "اسم المقرر": name,
            "الوحدات المعتمدة للمقرر": c.credits if c.credits != "" else "-",
            "حالة المقرر/ مستوفى": c.completion_label,
        })
    return pd.DataFrame(rows)

def _show_profile(profile: TraineeProfile) -> None:
    st.header(profile.name or profile.id)
    st.markdown(f"**الرقم التدريبي:** `{profile.id}`")

    details = profile.sorted_details()
    if details:
        cols = st.columns(4)
        for i, (key, value) in enumerate(details):
            with cols[i % 4]:
                st.markdown(f"{KIND_ICONS.get(detail_kind(key), 'ℹ️')} **{key}**")
                st.write(value)

    st.subheader(f"المقررات التدريبية ({len(profile.courses)})")
    if profile.courses:
        st.dataframe(_courses_frame(profile), width="stretch", hide_index=True)
    else:
        st.info("لا توجد مقررات مسجلة لهذا المتدرب.")

    if st.button("العودة لقائمة البحث"):
        st.session_state["current"] = None
        st.rerun()
# =========================

# Supervisor login
# =========================
with st.sidebar:
    if not st.session_state["supervisor"]:
        with st.form("supervisor_login"):
            pwd = st.text_input("كلمة المرور", type="password")
            if st.form_submit_button("دخول المشرف"):
                if SUPERVISOR_PASSWORD and hmac.compare_digest(pwd, SUPERVISOR_PASSWORD):
                    st.session_state["supervisor"] = True
                    st.rerun()
                else:
                    st.error("كلمة المرور غير صحيحة")
    else:
        if st.button("خروج المشرف"):
            st.session_state["supervisor"] = False
            st.rerun()
# =========================

# Supervisor: upload (replaces everything on the server)
# =========================
if st.session_state["supervisor"]:
    if st.session_state.get("server_ok"):
        st.success("حالة السيرفر: متصل")
    else:
        st.error("حالة السيرفر: غير متصل")

    st.metric("المتدربين المسجلين", len(trainees))
    st.warning("رفع ملف جديد سيؤدي إلى مسح واستبدال جميع البيانات الموجودة على السيرفر.")
    st.caption("يعتمد البرنامج على تقرير SH06 من نظام رايات.")

    upload = st.file_uploader("ملف البيانات (Excel/CSV)", type=["xlsx", "csv"], accept_multiple_files=False)
    if upload is not None and st.button("رفع البيانات"):
        try:
            headers, rows = load_table_from_upload(upload)
            published = publish_upload(rows, store, headers=headers)
        except RowSourceError:
            st.error(MSG_BAD_FILE)
        except EmptyBatch:
            st.error(MSG_EMPTY_UPLOAD)
        except StoreUnavailable:
            st.session_state["server_ok"] = False
            st.error(MSG_STORE_DOWN)
        else:
            st.session_state["trainees"] = published
            st.session_state["server_ok"] = True
            st.session_state["current"] = None
            st.success(MSG_UPLOADED)
    st.stop()
# =========================

# Public: search / view
# =========================
current = st.session_state["current"]
if current is not None:
    _show_profile(current)
    st.stop()

if not st.session_state.get("server_ok"):
    st.error(MSG_STORE_DOWN)
    st.stop()

if not trainees:
    st.info("لا توجد بيانات متاحة حالياً على السيرفر. لرفع البيانات يرجى تسجيل الدخول كمشرف.")
    st.stop()

st.subheader("استعراض السجل التدريبي للمتدرب")
with st.form("search"):
    term = st.text_input("الرقم التدريبي، الاسم، أو رقم الجوال", placeholder="مثال: 4239...")
    st.caption("عند البحث برقم الجوال يرجى ادخاله بدون صفر (مثال: 558...)")
    submitted = st.form_submit_button("عرض السجل")

if submitted and term.strip():
    try:
        found = find_trainee(trainees, term)
    except InvalidQuery:
        found = None
    if found is None:
        st.error(MSG_NOT_FOUND)
    else:
        st.session_state["current"] = found
        st.rerun()
