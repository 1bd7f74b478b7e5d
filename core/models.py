from dataclasses import dataclass


@dataclass(frozen=True)
class Passage:
    """
    One page of extracted PDF text.

    Guarantees:
    - source: file name of the originating PDF
    - position: 1-indexed page number inside the source
    - doc_id: SHA-256 of the source file bytes
    """

    source: str
    position: int
    text: str
    doc_id: str = ""


@dataclass(frozen=True)
class RetrievedPassage:
    passage: Passage
    score: float
    rank: int
