"""
Study material cache.

Remembers the latest notes and summary so a restarted client can pick up
where it left off. A quiz is generated from the summary when there is one,
otherwise from the raw notes.

A summary always belongs to the cached notes: saving different notes drops
the old summary.
"""

from __future__ import annotations

from dataclasses import dataclass

from .store import StateStore

NOTES_KEY = "studyspark-notes"
SUMMARY_KEY = "studyspark-summary"


@dataclass(frozen=True)
class StudyMaterial:
    notes: str = ""
    summary: str = ""
    source_name: str | None = None


class StudyMaterialCache:
    """Notes/summary recovery on top of a StateStore."""

    def __init__(self, store: StateStore):
        self.store = store

    def save_notes(self, notes: str, source_name: str | None = None) -> None:
        previous = self.store.get(NOTES_KEY) or {}
        if previous.get("text") != notes or previous.get("source_name") != source_name:
            self.store.delete(SUMMARY_KEY)
        self.store.put(NOTES_KEY, {"text": notes, "source_name": source_name})

    def save_summary(self, summary: str) -> None:
        # An empty summary never overwrites a good one
        if summary.strip():
            self.store.put(SUMMARY_KEY, {"text": summary})

    def save_material(self, notes: str, summary: str, source_name: str | None = None) -> None:
        """Replace notes and summary together."""
        self.save_notes(notes, source_name=source_name)
        self.save_summary(summary)

    def load(self) -> StudyMaterial:
        notes = self.store.get(NOTES_KEY) or {}
        summary = self.store.get(SUMMARY_KEY) or {}
        return StudyMaterial(
            notes=notes.get("text", ""),
            summary=summary.get("text", ""),
            source_name=notes.get("source_name"),
        )

    def quiz_source(self) -> str:
        """Summary if one exists, else notes, else an empty string."""
        material = self.load()
        return material.summary.strip() or material.notes.strip()

    def clear(self) -> None:
        self.store.delete(NOTES_KEY)
        self.store.delete(SUMMARY_KEY)
