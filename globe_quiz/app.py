from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Optional

import streamlit as st
from streamlit_autorefresh import st_autorefresh

from core import achievements, engine, storage
from core.achievements import AchievementResult
from core.geography import CONTINENTS, expand
from core.globe import build_globe, clicked_feature
from core.hover import HoverThrottle
from core.indexer import CountryIndex, flag_url, load_index
from core.models import ALL, Geography, Outcome, QuizMode, QuizState, QuizStatus
from core.profile import ProfileStore
from core.sfx import SoundBoard, SoundCue, cues_for
from core.timer import elapsed_seconds, format_duration

PAGE_TITLE = "Globe Quiz"
DEFAULT_COUNT = 10
COUNT_OPTIONS = [5, 10, 20, 50, ALL]

BASE_DIR = Path(__file__).resolve().parent
DATA_DIR = BASE_DIR / "data"
SOUND_DIR = BASE_DIR / "sounds"
PROFILE_DIR = BASE_DIR / ".profiles"
PREFS_PATH = BASE_DIR / ".cache" / "preferences.json"

logging.basicConfig(level=logging.INFO)


@st.cache_resource(show_spinner=True)
def get_index() -> CountryIndex:
    return load_index(DATA_DIR)


def get_state(index: CountryIndex) -> QuizState:
    if "quiz_state" not in st.session_state:
        state = engine.create_quiz_state(max_count=DEFAULT_COUNT)
        storage.apply_preferences(state, storage.load_preferences(PREFS_PATH))
        engine.set_countries(state, index.records)
        st.session_state.quiz_state = state
    return storage.ensure_sets(st.session_state.quiz_state)


def get_hover(state: QuizState) -> HoverThrottle:
    if "hover" not in st.session_state:
        st.session_state.hover = HoverThrottle(lambda feature_id: engine.set_hovered(state, feature_id))
    return st.session_state.hover


def get_profile() -> Optional[ProfileStore]:
    name = st.session_state.get("player_name", "").strip()
    if not name:
        return None
    slug = re.sub(r"[^a-z0-9_-]+", "-", name.lower()).strip("-") or "player"
    cached = st.session_state.get("profile")
    if cached is None or cached.display_name != name:
        cached = ProfileStore(PROFILE_DIR / f"{slug}.json", display_name=name)
        st.session_state.profile = cached
    return cached


def queue_cues(cues: List[SoundCue]) -> None:
    st.session_state.setdefault("pending_cues", []).extend(cues)


def play_pending_cues() -> None:
    board = SoundBoard(SOUND_DIR, lambda path: st.audio(str(path), autoplay=True))
    for cue in st.session_state.pop("pending_cues", []):
        board.play(cue)


def handle_outcome(state: QuizState, outcome: Outcome) -> None:
    if outcome == Outcome.IGNORED:
        return
    queue_cues(cues_for(outcome, finished=state.status == QuizStatus.FINISHED))
    st.rerun()


def render_sidebar(state: QuizState) -> None:
    st.sidebar.header("Quiz Settings")
    st.sidebar.text_input("Player name (to save achievements)", key="player_name")

    running = state.status == QuizStatus.RUNNING
    mode = st.sidebar.radio(
        "Quiz Mode",
        options=list(QuizMode),
        format_func=lambda m: m.display_name,
        index=list(QuizMode).index(state.mode),
        disabled=running,
    )
    regions = st.sidebar.multiselect(
        "Regions",
        options=[c.value for c in CONTINENTS],
        default=state.regions,
        disabled=running,
    )
    count = st.sidebar.selectbox(
        "Maximum countries",
        options=COUNT_OPTIONS,
        index=COUNT_OPTIONS.index(state.max_count) if state.max_count in COUNT_OPTIONS else 1,
        disabled=running,
    )

    if (mode, regions, count) != (state.mode, state.regions, state.max_count):
        engine.set_mode(state, mode)
        engine.set_regions(state, regions)
        engine.set_max_count(state, count)
        storage.save_preferences(state, PREFS_PATH)

    st.sidebar.caption(f"{len(state.filtered)} countries in pool")

    if state.status == QuizStatus.IDLE:
        if st.sidebar.button("Start", disabled=not engine.can_start(state), type="primary"):
            engine.start_quiz(state)
            st.rerun()
    elif st.sidebar.button("Reset"):
        engine.reset_quiz_state(state)
        st.session_state.pop("achievement", None)
        st.rerun()


def render_prompt(state: QuizState, index: CountryIndex) -> None:
    target = engine.current_target(state)
    if target is None:
        return

    st.progress(engine.progress_percent(state) / 100)
    st.caption(f"Question {state.index + 1} / {len(state.quiz)}")
    if state.mode == QuizMode.COUNTRY:
        st.subheader(f"Find: {target.name}")
    elif state.mode == QuizMode.CAPITAL:
        st.subheader(f"Which country has the capital {index.capital_for(target) or '—'}?")
    else:
        url = flag_url(target.iso_a2)
        st.subheader("Which country flies this flag?")
        if url:
            st.image(url, width=160)

    cols = st.columns(4)
    cols[0].metric("Correct", len(state.correct))
    cols[1].metric("Incorrect", state.errors)
    cols[2].metric("Skipped", state.skipped)
    cols[3].metric("Time", format_duration(elapsed_seconds(state)))


def render_answer_controls(state: QuizState, hover: HoverThrottle) -> None:
    names = {feature.id: feature.name for feature in state.filtered if feature.id not in state.correct}
    choice = st.selectbox(
        "Or pick a country",
        options=[None, *sorted(names, key=names.get)],
        format_func=lambda key: "—" if key is None else names[key],
        key=f"pick-{state.index}-{state.errors}",
    )
    hover.push(choice)

    left, right = st.columns(2)
    if left.button("Submit", disabled=choice is None):
        handle_outcome(state, engine.answer(state, choice))
    if right.button("Skip"):
        handle_outcome(state, engine.skip(state))


def render_globe(state: QuizState, index: CountryIndex) -> None:
    event = st.plotly_chart(
        build_globe(index, state),
        use_container_width=True,
        on_select="rerun",
        selection_mode="points",
        key=f"globe-{state.status.value}-{state.index}-{state.errors}",
    )
    feature_id = clicked_feature(event)
    if feature_id and state.status == QuizStatus.RUNNING:
        handle_outcome(state, engine.answer(state, feature_id))


def render_final_results(state: QuizState) -> None:
    st.header("Quiz complete")

    result: Optional[AchievementResult] = st.session_state.get("achievement")
    profile = get_profile()
    settled = achievements.settle(state, store=profile)
    if settled is not None:
        result = settled
        st.session_state.achievement = settled

    cols = st.columns(4)
    cols[0].metric("Correct", len(state.correct))
    cols[1].metric("Incorrect", state.errors)
    cols[2].metric("Skipped", state.skipped)
    cols[3].metric("Time used", format_duration(elapsed_seconds(state)))

    if result is not None:
        label = result.label(logged_in=profile is not None)
        if result.unlocked and profile is not None and result.is_new:
            st.success(f"🏆 {label}")
        else:
            st.info(label)
        if result.unlocked and profile is not None and not result.persisted:
            st.warning("Your achievement could not be saved. It will be kept for this session only.")

    if st.button("Play again"):
        engine.reset_quiz_state(state)
        st.session_state.pop("achievement", None)
        st.rerun()


def render_trophies(state: QuizState) -> None:
    profile = get_profile()
    unlocked = set(profile.unlocked()) if profile is not None else set()
    result: Optional[AchievementResult] = st.session_state.get("achievement")
    if result is not None and result.key is not None:
        unlocked.add(result.key)

    with st.expander("Achievements"):
        st.caption(
            "Achievements are unlocked by answering all countries in a geography without a single "
            'mistake or skip. Set maximum countries to "All" to play for one.'
        )
        rows = []
        for geo, flags in achievements.achievement_grid(unlocked):
            row = {"Geography": geo.value}
            row.update({mode.display_name: "✅" if on else "🔒" for mode, on in flags.items()})
            rows.append(row)
        st.table(rows)

        if state.status == QuizStatus.IDLE:
            geo = st.selectbox("Play for", options=list(Geography), format_func=lambda g: g.value)
            if st.button("Set up this geography"):
                engine.set_regions(state, [c.value for c in CONTINENTS if c in expand(geo)])
                engine.set_max_count(state, ALL)
                storage.save_preferences(state, PREFS_PATH)
                st.rerun()


def main() -> None:
    st.set_page_config(page_title=PAGE_TITLE, layout="wide")
    st.title("🌍 Globe Quiz")

    try:
        index = get_index()
    except Exception as exc:
        st.error(f"Failed to load country data: {exc}")
        st.stop()

    state = get_state(index)
    hover = get_hover(state)

    render_sidebar(state)
    play_pending_cues()

    if state.status == QuizStatus.RUNNING:
        st_autorefresh(interval=1_000, key="timer-refresh")
        render_prompt(state, index)
        render_answer_controls(state, hover)
    elif state.status == QuizStatus.FINISHED:
        render_final_results(state)

    hover.flush()
    render_globe(state, index)
    render_trophies(state)


if __name__ == "__main__":
    main()
