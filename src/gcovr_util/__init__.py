"""gcovr-util: diff and uncovered-line analysis for gcovr JSON reports."""

__version__ = "0.1.0"
