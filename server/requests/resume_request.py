"""ResumeRequest model."""

from core import HITLDecision


class ResumeRequest(HITLDecision):
    """A human decision on a paused thread: approve, reject or edit."""
