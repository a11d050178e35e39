"""
Transcript accumulation for spoken answers.
"""

from mockinterview.models.monitoring import TranscriptEvent


class TranscriptAccumulator:
    """
    Merges streaming speech results into the authoritative answer text.

    Final segments are immutable and appended in arrival order. The interim
    segment is revisable and only ever shown, never committed.
    """

    def __init__(self):
        self._segments: list[str] = []
        self._interim: str = ""

    @property
    def text(self) -> str:
        """Authoritative answer: all final segments, trimmed and space-joined."""
        return " ".join(self._segments)

    @property
    def interim(self) -> str:
        return self._interim

    @property
    def display_text(self) -> str:
        """What the candidate sees: final text followed by the interim guess."""
        if self._interim:
            return f"{self.text} {self._interim}".strip()
        return self.text

    def consume(self, event: TranscriptEvent) -> str:
        """Apply one result event and return the authoritative text."""
        for segment in event.final_segments:
            cleaned = segment.strip()
            if cleaned:
                self._segments.append(cleaned)
        self._interim = (event.interim or "").strip()
        return self.text

    def end_of_stream(self) -> None:
        """An interim result never survives the end of a recognition stream."""
        self._interim = ""

    def reset(self) -> None:
        self._segments = []
        self._interim = ""

    def restore(self, text: str) -> None:
        """Seed from previously committed text (e.g. a resumed draft)."""
        self.reset()
        if text.strip():
            self._segments.append(text.strip())
