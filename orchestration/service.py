from typing import Optional

from core.exceptions import ValidationError
from core.logger import get_logger
from orchestration.graph import build_graph
from orchestration.lc_retriever import RetrieverRunnable
from orchestration.synthesizer import AnswerSynthesizer
from rag.index_manager import IndexManager, IndexState
from rag.retriever import Retriever

logger = get_logger("orchestration.service")


def validate_question(question: Optional[str]) -> str:
    if not isinstance(question, str) or not question.strip():
        raise ValidationError("Question is required")
    return question.strip()


class QAService:
    """
    Question answering over the indexed documents.

    Ensures the index is built (once), then runs retrieve -> synthesize.
    """

    def __init__(
        self,
        index_manager: IndexManager,
        retriever: Retriever,
        synthesizer: AnswerSynthesizer,
        top_k: Optional[int] = None,
    ):
        self.index_manager = index_manager
        self.top_k = top_k or retriever.top_k
        self.graph = build_graph(
            RetrieverRunnable(retriever),
            synthesizer,
        )

    def index_status(self) -> IndexState:
        return self.index_manager.status()

    def ask(self, question: Optional[str]) -> str:
        question = validate_question(question)

        logger.info("event=QUESTION_RECEIVED | question_len=%d", len(question))

        index = self.index_manager.get_index()

        result = self.graph.invoke({
            "question": question,
            "index": index,
            "k": self.top_k,
        })

        return result["answer"]
