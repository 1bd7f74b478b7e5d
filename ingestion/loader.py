import hashlib
from pathlib import Path
from typing import List, Sequence

from pypdf import PdfReader

from core.logger import get_logger
from core.exceptions import DocumentLoadError
from core.models import Passage


logger = get_logger("ingestion.loader")


def load_pdf(file_path: str) -> List[Passage]:
    """
    Loads and extracts text from a PDF file, one Passage per page.

    Guarantees:
    - doc_id: Stable SHA-256 hash of file content
    - position: 1-indexed page number, kept even when blank pages are skipped
    - text: Whitespace-normalized page text
    """
    try:
        path = Path(file_path)

        if not path.is_file():
            raise FileNotFoundError(f"No PDF found at {file_path}")

        logger.info(
            "event=PDF_LOAD_START | file=%s",
            path.name
        )

        # Generate stable doc_id
        sha256_hash = hashlib.sha256()
        with open(path, "rb") as f:
            for byte_block in iter(lambda: f.read(4096), b""):
                sha256_hash.update(byte_block)
        doc_id = sha256_hash.hexdigest()

        reader = PdfReader(path)
        total_pages = len(reader.pages)

        logger.info(
            "event=PDF_PAGES_DETECTED | file=%s | pages=%d",
            path.name,
            total_pages
        )

        passages: List[Passage] = []

        for i, page in enumerate(reader.pages):
            raw_text = page.extract_text() or ""
            normalized = " ".join(raw_text.split()).strip()

            if normalized:
                passages.append(
                    Passage(
                        source=path.name,
                        position=i + 1,
                        text=normalized,
                        doc_id=doc_id,
                    )
                )

        logger.info(
            "event=PDF_LOAD_COMPLETE | file=%s | pages_with_text=%d",
            path.name,
            len(passages),
        )

        return passages

    except Exception as e:
        logger.exception(
            "event=PDF_LOAD_FAILED | file=%s",
            file_path
        )
        raise DocumentLoadError(
            "Failed to load and parse PDF",
            error=e,
            context={"file_path": str(file_path)},
        ) from e


def load_documents(file_paths: Sequence[str]) -> List[Passage]:
    """Loads every PDF in order. The first failing path aborts the whole load."""
    passages: List[Passage] = []

    for file_path in file_paths:
        passages.extend(load_pdf(file_path))

    logger.info(
        "event=DOCUMENTS_LOADED | files=%d | passages=%d",
        len(file_paths),
        len(passages),
    )

    return passages
