"""Streamlit front end for the Game Tracker.

`ui/app.py` is the entry point (`streamlit run ui/app.py`); components draw
the tabs and forms and talk only to the session's `GameManager`.
"""
