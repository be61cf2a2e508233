"""Schema command app definition."""

from cyclopts import App

app = App(
    name="schema",
    help="Inspect, validate and author workflow schemas",
    help_on_error=True,
)
