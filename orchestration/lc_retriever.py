from typing import Dict, Any

from langchain_core.runnables import Runnable

from rag.retriever import Retriever
from core.logger import get_logger

class RetrieverRunnable(Runnable):
    """
    LangGraph adapter for top-k retrieval.
    """

    def __init__(self, retriever: Retriever):
        self.retriever = retriever
        self.logger = get_logger("orchestration.retriever")

    def invoke(
        self,
        state: Dict[str, Any],
        config=None,
        **kwargs,
    ) -> Dict[str, Any]:

        context = self.retriever.retrieve(
            state["index"],
            state["question"],
            state.get("k"),
        )

        self.logger.info(
            "event=RETRIEVAL_NODE_COMPLETE | passages=%d",
            len(context),
        )

        return {"context": context}
