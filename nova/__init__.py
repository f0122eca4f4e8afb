"""Nova: conversational question answering over uploaded documents."""

__version__ = "0.1.0"
