"""Chart rendering for the game tracker: Matplotlib PNGs and Plotly figures."""
