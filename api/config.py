from typing import List, Literal

from pydantic_settings import BaseSettings

ProviderName = Literal["huggingface", "openai", "gemini"]

class Settings(BaseSettings):
    # ===== Providers =====
    EMBEDDING_PROVIDER: ProviderName = "huggingface"
    LLM_PROVIDER: ProviderName = "huggingface"

    # ===== Secrets =====
    EMBEDDING_API_KEY: str = ""
    LLM_API_KEY: str = ""

    # ===== Models =====
    EMBEDDING_MODEL: str = "sentence-transformers/all-MiniLM-L6-v2"
    LLM_MODEL_ID: str = "meta-llama/Meta-Llama-3-8B-Instruct"

    # ===== Documents =====
    PDF_PATHS: List[str] = ["data/pt_adn.pdf", "data/pt_r5.pdf"]

    # ===== Retrieval =====
    RETRIEVAL_K: int = 4
    EMBEDDING_BATCH_SIZE: int = 32

    # ===== Generation =====
    TEMPERATURE: float = 0.2
    MAX_ANSWER_TOKENS: int = 1024
    ANSWER_LANGUAGE: str = "Spanish"
    NO_CONTEXT_ANSWER: str = (
        "No encontré información sobre esta pregunta en los planes de trabajo disponibles."
    )

    # ===== Limits =====
    MAX_RETRIES: int = 3
    RETRY_BASE_DELAY: float = 0.8
    RETRY_MAX_DELAY: float = 10.0
    PROVIDER_TIMEOUT_SECONDS: float = 15

    # ===== UI =====
    API_URL: str = "http://localhost:8000"

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
