from typing import TypedDict, List, Optional

from core.models import RetrievedPassage
from rag.vector_index import VectorIndex

class GraphState(TypedDict, total=False):
    question: str
    index: VectorIndex
    k: Optional[int]
    context: List[RetrievedPassage]
    answer: str
