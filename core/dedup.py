"""Per-session record of message IDs already sent to the consumer."""


class DedupTracker:
    """Set of emitted message IDs with an atomic check-and-record step."""

    def __init__(self) -> None:
        self._seen: set[str] = set()

    def record(self, message_id: str) -> bool:
        """
        Record a message ID.

        Returns:
            True if the ID was new, False if it had already been recorded
        """
        if message_id in self._seen:
            return False
        self._seen.add(message_id)
        return True

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._seen

    def __len__(self) -> int:
        return len(self._seen)
