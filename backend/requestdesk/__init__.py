"""Request desk: turns team help requests into Trello cards."""

__version__ = "1.0.0"
