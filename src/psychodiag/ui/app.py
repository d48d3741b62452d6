from __future__ import annotations

import hashlib
import logging
import traceback
from typing import Dict, Optional

import pandas as pd
import streamlit as st

from psychodiag.config import APP_NAME, APP_VERSION, CSV_ENCODING
from psychodiag.core.assembler import LoadResult, RespondentRecord, load_respondents
from psychodiag.core.definitions import TESTS, TEST_ORDER
from psychodiag.core.diagnostics import NullSink
from psychodiag.core.errors import PsychodiagError
from psychodiag.core.levels import Level
from psychodiag.core.report import (
    breakdown_frame,
    category_breakdown,
    cohort_levels,
    cohort_means,
    means_frame,
    scores_frame,
)

logger = logging.getLogger(__name__)

# Streamlit reruns the script on every widget change; the last load is kept
# in session state, keyed by a digest of the uploaded bytes, so the tables
# survive a selectbox change and a re-upload under the same name is parsed.
SESSION_RESULT_KEY = "psychodiag_load_result"
SESSION_DIGEST_KEY = "psychodiag_upload_digest"


def upload_digest(uploaded) -> str:
    return hashlib.sha256(uploaded.getvalue()).hexdigest()


def load_upload(uploaded, state) -> LoadResult:
    """
    Parse an uploaded file unless the same bytes were parsed last time.

    `state` is the session-state mapping (a plain dict works too). Bad input
    never raises here: it comes back as LoadResult.error.
    """
    digest = upload_digest(uploaded)
    if state.get(SESSION_DIGEST_KEY) != digest:
        text = uploaded.getvalue().decode(CSV_ENCODING, errors="replace")
        # Diagnostics are shown in the UI; keep the server log quiet.
        state[SESSION_RESULT_KEY] = load_respondents(text, sink=NullSink())
        state[SESSION_DIGEST_KEY] = digest
        logger.info("Parsed upload %r (%s)", getattr(uploaded, "name", ""), digest[:12])
    return state[SESSION_RESULT_KEY]


def _render_upload() -> Optional[LoadResult]:
    uploaded = st.file_uploader("CSV-файл з відповідями", type=["csv"])
    if uploaded is None:
        st.info("Завантажте CSV-експорт опитування, щоб побачити результати.")
        return None

    try:
        with st.spinner("Обробка файлу..."):
            return load_upload(uploaded, st.session_state)
    except Exception:
        st.error("Unexpected error while reading the CSV file.")
        st.text_area("Traceback", value=traceback.format_exc(), height=260)
        return None


def _render_summary(result: LoadResult) -> None:
    st.success(f"Оброблено респондентів: {len(result.records)}")
    if result.skipped_rows:
        st.warning(
            f"Пропущено рядків з недостатньою кількістю стовпців: {len(result.skipped_rows)} "
            f"(рядки {', '.join(str(n) for n in result.skipped_rows)})"
        )


def _render_cohort(result: LoadResult) -> None:
    means = cohort_means(result.records)
    levels: Dict[str, Level] = cohort_levels(means)

    st.subheader("Середні показники групи")
    cols = st.columns(len(levels))
    for col, (test_key, level) in zip(cols, levels.items()):
        with col:
            st.metric(TESTS[test_key].label, f"{means[f'{test_key}.total']:.2f}", level.label, delta_color="off")

    st.dataframe(means_frame(means), use_container_width=True, hide_index=True)


def _render_test_tabs(result: LoadResult) -> None:
    tabs = st.tabs([TESTS[key].label for key in TEST_ORDER])
    for tab, test_key in zip(tabs, TEST_ORDER):
        with tab:
            st.dataframe(scores_frame(result.records, test_key), use_container_width=True, hide_index=True)


def _render_breakdown(result: LoadResult) -> None:
    with st.expander("Деталізація за питаннями", expanded=False):
        col1, col2, col3 = st.columns(3)
        with col1:
            index = st.selectbox(
                "Респондент",
                options=list(range(len(result.records))),
                format_func=lambda i: result.records[i].email or f"#{i + 1}",
            )
        with col2:
            test_key = st.selectbox("Тест", options=list(TEST_ORDER), format_func=lambda k: TESTS[k].label)
        test = TESTS[test_key]
        with col3:
            category_key = st.selectbox(
                "Шкала",
                options=[cat.key for cat in test.categories],
                format_func=lambda k: test.category(k).name,
            )

        record: RespondentRecord = result.records[index]
        try:
            rows = category_breakdown(record, test_key, category_key)
        except PsychodiagError as e:
            st.error(str(e))
            return

        score = record.scores(test_key).category(category_key)
        st.write(f"{score.name}: {score.score} з {score.max_score}" + (f" ({score.level})" if score.level else ""))
        st.dataframe(breakdown_frame(rows), use_container_width=True, hide_index=True)


def _render_diagnostics(result: LoadResult) -> None:
    with st.expander(f"Нерозпізнані відповіді ({len(result.diagnostics)})", expanded=False):
        if not result.diagnostics:
            st.write("Усі відповіді розпізнано.")
            return
        df = pd.DataFrame(
            [
                {
                    "Тест": d.test,
                    "Питання": d.question,
                    "Респондент": d.respondent,
                    "Значення": d.raw,
                    "Причина": d.reason,
                    "Замінено на": d.default,
                }
                for d in result.diagnostics
            ]
        )
        st.dataframe(df, use_container_width=True, hide_index=True)


def run_app() -> None:
    st.set_page_config(page_title=APP_NAME, page_icon="🧠", layout="wide")
    st.title(APP_NAME)
    st.caption(f"Version {APP_VERSION}")

    result = _render_upload()
    if result is None:
        return

    if result.error:
        st.error(result.error)
        if result.skipped_rows:
            st.write(f"Пропущені рядки: {result.skipped_rows}")
        return

    _render_summary(result)
    _render_cohort(result)
    _render_test_tabs(result)
    _render_breakdown(result)
    _render_diagnostics(result)
