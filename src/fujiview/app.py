"""FujiView: Streamlit dashboard for Mount Fuji visibility scores."""

import asyncio
import html

import streamlit as st
from dotenv import load_dotenv

load_dotenv()

from fujiview.config import (  # noqa: E402
    UNKNOWN_SCORE,
    configure_logging,
    load_settings,
)
from fujiview.errors import ProtocolError  # noqa: E402
from fujiview.forecast import ForecastClient  # noqa: E402
from fujiview.i18n import t  # noqa: E402
from fujiview.messages import (  # noqa: E402
    Message,
    build_update_all,
    build_update_single,
)
from fujiview.models import TimeWindow  # noqa: E402
from fujiview.orchestrator import FetchOrchestrator  # noqa: E402
from fujiview.scoreboard import ScoreBoard, score_color, score_label  # noqa: E402

_settings = load_settings()
configure_logging(_settings.log_level)
_lang = _settings.lang


async def _exchange(payload: Message | None) -> list[Message]:
    """Send one trigger to the scoring side and collect the reports it posts.

    A None payload asks the scoring side for its startup ready announcement.
    """
    outbox: list[Message] = []
    async with ForecastClient(_settings) as client:
        orchestrator = FetchOrchestrator(client.fetch, outbox.append)
        if payload is None:
            orchestrator.announce_ready()
        else:
            await orchestrator.handle(payload)
    return outbox


def _send(payload: Message | None) -> None:
    try:
        posted = asyncio.run(_exchange(payload))
    except ProtocolError as e:
        st.session_state.error_msg = t("error_protocol", _lang).format(
            error=html.escape(str(e))
        )
        return
    # The board answers ready with update_all
    for reply in st.session_state.board.apply_all(posted):
        _send(reply)


st.set_page_config(
    page_title=t("page_title", _lang),
    page_icon="🗻",
    layout="centered",
    initial_sidebar_state="collapsed",
)

# --- Session state initialization ---

if "board" not in st.session_state:
    st.session_state.board = ScoreBoard()
if "error_msg" not in st.session_state:
    st.session_state.error_msg = None
if "handshake_done" not in st.session_state:
    st.session_state.handshake_done = False

board: ScoreBoard = st.session_state.board

st.markdown(
    """
    <style>
    html, body, [data-testid="stAppViewContainer"], [data-testid="stMain"] {
        background-color: #002055 !important;
    }
    [data-testid="stHeader"], [data-testid="stToolbar"] {
        display: none !important;
    }
    .region-bubble {
        background: #aaaaff;
        color: #ffffff;
        border-radius: 999px;
        text-align: center;
        font-size: 1.3rem;
        padding: 0.3rem 0;
        margin-bottom: 0.8rem;
    }
    .time-bubble {
        border-radius: 14px;
        padding: 1rem 1.4rem;
        margin-bottom: 0.6rem;
        display: flex;
        align-items: center;
        justify-content: space-between;
    }
    .time-morning { background: #ff5555; color: #ffaaaa; }
    .time-afternoon { background: #555599; color: #55aaff; }
    .score-bubble {
        color: #ffffff;
        border-radius: 10px;
        padding: 0.4rem 1rem;
        text-align: center;
        min-width: 9rem;
    }
    .score-value { font-size: 1.6rem; font-weight: 700; }
    .loading-text { color: #aaaaff; text-align: center; margin-top: 30vh; }
    </style>
    """,
    unsafe_allow_html=True,
)

# --- Startup handshake: scoring side announces ready, client answers update_all ---
if not st.session_state.handshake_done:
    st.session_state.handshake_done = True
    loading = st.empty()
    loading.markdown(
        f"<div class='loading-text'>"
        f"{t('loading', _lang).format(done=board.loaded_progress(), total=4)}</div>",
        unsafe_allow_html=True,
    )
    _send(None)
    loading.empty()

# --- Error message ---
if st.session_state.error_msg:
    st.error(st.session_state.error_msg)
    st.session_state.error_msg = None

st.markdown(
    f"<div class='region-bubble'>{t('region_' + board.current_region.value, _lang)}</div>",
    unsafe_allow_html=True,
)

for time_window in TimeWindow:
    score = board.score(time_window)
    if score == UNKNOWN_SCORE:
        score_html = f"<div class='score-bubble' style='background:#555555'>{t('score_unknown', _lang)}</div>"
    else:
        score_html = (
            f"<div class='score-bubble' style='background:{score_color(score)}'>"
            f"<div class='score-value'>{score}</div>"
            f"<div>{t(score_label(score), _lang)}</div></div>"
        )
    st.markdown(
        f"<div class='time-bubble time-{time_window.value}'>"
        f"<span>{t('time_' + time_window.value, _lang)}</span>{score_html}</div>",
        unsafe_allow_html=True,
    )

col1, col2, col3, col4 = st.columns(4)
with col1:
    if st.button(t("btn_switch_region", _lang), use_container_width=True):
        board.toggle_region()
        st.rerun()
with col2:
    if st.button(t("btn_refresh_all", _lang), use_container_width=True):
        with st.spinner(t("loading", _lang).format(done=0, total=4)):
            _send(build_update_all())
        st.rerun()
for col, time_window in ((col3, TimeWindow.MORNING), (col4, TimeWindow.AFTERNOON)):
    with col:
        if st.button(
            f"{t('btn_refresh_single', _lang)}: {t('time_' + time_window.value, _lang)}",
            key=f"refresh_{time_window.value}",
            use_container_width=True,
        ):
            with st.spinner(t("loading", _lang).format(done=0, total=1)):
                _send(build_update_single(board.current_region, time_window))
            st.rerun()
