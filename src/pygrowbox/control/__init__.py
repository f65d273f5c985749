"""Operator control paths (target submission)."""

from pygrowbox.control.submission import TargetSubmissionController

__all__ = ["TargetSubmissionController"]
