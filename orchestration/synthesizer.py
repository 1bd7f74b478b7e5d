from pathlib import Path
from typing import Any, Dict, List

from langchain_core.runnables import Runnable

from core.exceptions import SynthesisError
from core.logger import get_logger
from core.models import RetrievedPassage
from core.retry import RetryPolicy, call_with_retry
from rag.providers import ChatProvider

PROMPTS_DIR = Path(__file__).parent / "prompts"
PASSAGE_SEPARATOR = "\n\n---\n\n"


def format_context(context: List[RetrievedPassage]) -> str:
    return PASSAGE_SEPARATOR.join(
        f"[{c.passage.source} | page {c.passage.position}] {c.passage.text}"
        for c in context
    )


class AnswerSynthesizer(Runnable):
    """
    LangGraph node that turns a question plus retrieved passages into an answer.
    """

    def __init__(
        self,
        provider: ChatProvider,
        retry_policy: RetryPolicy,
        temperature: float = 0.2,
        max_tokens: int = 1024,
        language: str = "Spanish",
        no_context_answer: str = "I don't have enough information to answer this question.",
    ):
        self.provider = provider
        self.retry_policy = retry_policy
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.language = language
        self.no_context_answer = no_context_answer

        self.system_prompt = (PROMPTS_DIR / "system.txt").read_text(encoding="utf-8")
        self.answer_prompt = (PROMPTS_DIR / "answer.txt").read_text(encoding="utf-8")

        self.logger = get_logger("orchestration.synthesizer")

    def build_prompt(self, question: str, context: List[RetrievedPassage]) -> str:
        return self.answer_prompt.format(
            context=format_context(context),
            question=question,
            language=self.language,
        )

    def _complete(self, user_prompt: str) -> str:
        answer = self.provider.complete(
            self.system_prompt,
            user_prompt,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        answer = (answer or "").strip()

        if not answer:
            raise ValueError("chat provider returned an empty completion")

        return answer

    def synthesize(self, question: str, context: List[RetrievedPassage]) -> str:
        if not context:
            self.logger.info("event=SYNTHESIS_NO_CONTEXT")
            return self.no_context_answer

        user_prompt = self.build_prompt(question, context)

        try:
            answer = call_with_retry(
                lambda: self._complete(user_prompt),
                self.retry_policy,
                operation="LLM",
            )
        except Exception as e:
            self.logger.error(
                "event=LLM_DEGRADED | model=%s",
                self.provider.model,
            )
            raise SynthesisError(
                "Answer generation failed",
                error=e,
                context={
                    "model": self.provider.model,
                    "source_count": len(context),
                },
            ) from e

        self.logger.info(
            "event=LLM_SUCCESS | sources=%d | answer_len=%d",
            len(context),
            len(answer),
        )
        return answer

    def invoke(
        self,
        state: Dict[str, Any],
        config=None,
        **kwargs,
    ) -> Dict[str, Any]:
        answer = self.synthesize(state["question"], state.get("context") or [])
        return {"answer": answer}
