"""
NeonSweeper - Interactive Demo

Run with: streamlit run app/demo.py
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import streamlit as st
from typing import Dict, Optional, Tuple

from neonsweeper import GameConfig, GameSession, GameState
from neonsweeper.config import DIFFICULTY_PRESETS
from neonsweeper.utils import format_elapsed


def probability_color(probability: int) -> str:
    """Green for safe, red for dangerous, amber in between."""
    if probability == 0:
        return "#1b5e20"
    if probability == 100:
        return "#b71c1c"
    if probability < 30:
        return "#33691e"
    if probability < 60:
        return "#f57f17"
    return "#e65100"


def render_board_html(
    session: GameSession,
    probabilities: Optional[Dict[Tuple[int, int], int]] = None,
    highlight_cell: Optional[Tuple[int, int]] = None,
) -> str:
    """Render the board as HTML, overlaying mine probabilities when given."""
    board = session.board
    show_mines = board.state.is_terminal

    # Scale cell size based on board size
    if board.size >= 16:
        cell_size = 22
        font_size = "11px"
    else:
        cell_size = 32
        font_size = "14px"

    colors = {
        "1": "#39ff14",
        "2": "#ffff00",
        "3": "#ff8800",
        "4": "#ff00ff",
        "5": "#ff0000",
        "6": "#800080",
        "7": "#000080",
        "8": "#808080",
    }

    html = '<div style="font-family: monospace; line-height: 1.2;">'
    html += '<table style="border-collapse: collapse; margin: auto; background: #0b0f1a;">'

    html += "<tr><td></td>"
    for col in range(board.size):
        html += f'<td style="color: #00e5ff; text-align: center; font-size: {font_size};">{col}</td>'
    html += "</tr>"

    for row in range(board.size):
        html += f'<tr><td style="color: #00e5ff; font-size: {font_size}; padding-right: 4px;">{row}</td>'
        for col in range(board.size):
            cell = board.grid[row][col]

            if cell.is_revealed and cell.is_mine:
                display, bg, text_color = "M", "#ff0000", "#ffffff"  # Hit mine
            elif cell.is_revealed:
                count = cell.neighbor_mine_count
                display = str(count) if count else " "
                bg, text_color = "#1a2233", colors.get(str(count), "#39ff14")
            elif cell.is_flagged:
                display, bg, text_color = "F", "#ffa500", "#ffffff"
            elif show_mines and cell.is_mine:
                display, bg, text_color = "M", "#ffcccc", "#ff0000"
            elif probabilities is not None and (row, col) in probabilities:
                p = probabilities[(row, col)]
                display, bg, text_color = f"{p}", probability_color(p), "#ffffff"
            else:
                display, bg, text_color = ".", "#37474f", "#90a4ae"

            border = "2px solid #00e5ff" if (row, col) == highlight_cell else "1px solid #263238"

            html += f'''<td style="
                width: {cell_size}px; height: {cell_size}px;
                text-align: center;
                background: {bg};
                border: {border};
                color: {text_color};
                font-weight: bold;
                font-size: {font_size};
            ">{display}</td>'''
        html += "</tr>"

    html += "</table></div>"
    return html


def main():
    st.set_page_config(
        page_title="NeonSweeper",
        page_icon="💣",
        layout="wide",
    )

    st.title("NeonSweeper")
    st.markdown("""
    Clear the minefield with help from a probability assistant.
    """)

    # Sidebar configuration
    st.sidebar.header("Game Configuration")

    preset = st.sidebar.selectbox(
        "Difficulty Preset",
        list(DIFFICULTY_PRESETS) + ["custom"],
        index=list(DIFFICULTY_PRESETS).index("standard"),
    )

    if preset == "custom":
        size = st.sidebar.slider("Size", 4, 20, 10)
        mines = st.sidebar.slider("Mines", 1, size * size - 1, min(15, size * size - 1))
    else:
        size, mines = DIFFICULTY_PRESETS[preset]

    # Initialize session state
    if "session" not in st.session_state:
        st.session_state.session = GameSession(GameConfig(size=size, mine_count=mines))
        st.session_state.messages = []
        st.session_state.highlight = None
        st.session_state.prev_settings = (size, mines)

    session: GameSession = st.session_state.session

    # Auto-generate new game when board settings change
    if st.session_state.prev_settings != (size, mines):
        session.new_game(size, mines)
        st.session_state.messages = []
        st.session_state.highlight = None
        st.session_state.prev_settings = (size, mines)

    def say(message: str) -> None:
        st.session_state.messages.insert(0, message)
        del st.session_state.messages[8:]

    board_col, side_col = st.columns([2, 1])

    with board_col:
        st.subheader("Minefield")

        pick_col1, pick_col2 = st.columns(2)
        with pick_col1:
            row = st.number_input("Row", 0, session.board.size - 1, session.board.size // 2)
        with pick_col2:
            col = st.number_input("Column", 0, session.board.size - 1, session.board.size // 2)

        btn_col1, btn_col2, btn_col3 = st.columns(3)
        with btn_col1:
            if st.button("Reveal", type="primary"):
                result = session.reveal(int(row), int(col))
                session.run_pending()
                if not result.effective:
                    say("Nothing to do on that cell.")
                elif result.state is GameState.GAME_OVER:
                    say("CRITICAL FAILURE: Mine detonated! Mission failed.")
                elif result.state is GameState.VICTORY:
                    say(f"MISSION ACCOMPLISHED! Final score: {session.score}")
                st.session_state.highlight = None
                st.rerun()
        with btn_col2:
            if st.button("Flag"):
                session.toggle_flag(int(row), int(col))
                session.run_pending()
                st.rerun()
        with btn_col3:
            if st.button("New Game"):
                session.new_game()
                st.session_state.highlight = None
                say("New mission initiated. Scanning for optimal entry points...")
                st.rerun()

        # Same size and mine count, fresh layout on the next first reveal
        if session.board.state.is_terminal and st.button("Restart Board"):
            board = session.board
            board.reset()
            session.load_board(board)
            st.session_state.highlight = None
            st.rerun()

        probabilities = session.probabilities if session.engine_active else None
        html = render_board_html(session, probabilities, st.session_state.highlight)
        st.markdown(html, unsafe_allow_html=True)

        st.markdown("""
        <div style="font-size: 12px; margin-top: 10px;">
        <b>Legend:</b>
        <span style="background: #37474f; color: #90a4ae; padding: 2px 6px; margin: 0 4px; font-weight: bold;">.</span> Unopened
        <span style="background: #1b5e20; color: white; padding: 2px 6px; margin: 0 4px; font-weight: bold;">0</span> Certainly safe
        <span style="background: #b71c1c; color: white; padding: 2px 6px; margin: 0 4px; font-weight: bold;">100</span> Certain mine
        <span style="background: #ffa500; color: white; padding: 2px 6px; margin: 0 4px; font-weight: bold;">F</span> Flagged
        </div>
        """, unsafe_allow_html=True)

    with side_col:
        st.subheader("AI Assistant")

        board = session.board
        mcol1, mcol2 = st.columns(2)
        with mcol1:
            st.metric("State", board.state.value)
            st.metric("Mines Left", board.remaining_mine_estimate())
        with mcol2:
            st.metric("Time", format_elapsed(session.elapsed()))
            st.metric("Accuracy", f"{board.accuracy()}%")

        if st.button("AI Engine: " + ("ONLINE" if session.engine_active else "OFFLINE")):
            if not session.toggle_probability_engine():
                say("AI Protocol requires active game state.")
            st.rerun()

        ai_col1, ai_col2, ai_col3 = st.columns(3)
        with ai_col1:
            if st.button("Hint"):
                hint = session.get_hint()
                st.session_state.highlight = hint.position
                say(hint.message())
                st.rerun()
        with ai_col2:
            if st.button("Auto-Solve"):
                outcome = session.auto_solve()
                say(outcome.message())
                session.run_pending()
                st.rerun()
        with ai_col3:
            if st.button("Deep Scan"):
                report = session.deep_analysis()
                say(report.summary() if report else "Deep analysis requires an active game state.")
                st.rerun()

        if session.engine_active and session.probabilities:
            values = list(session.probabilities.values())
            st.text(f"Safe zones: {values.count(0)}  Danger zones: {values.count(100)}")

        st.markdown("---")
        for message in st.session_state.messages:
            st.text(message)

        st.markdown("---")
        st.subheader("Statistics")
        stats = session.stats
        st.text(f"Games played: {stats.games_played}")
        st.text(f"Win rate: {stats.win_rate}%")
        best = format_elapsed(stats.best_time) if stats.best_time is not None else "--:--"
        st.text(f"Best time: {best}")


if __name__ == "__main__":
    main()
