"""Ingest company knowledge documents into the Pinecone index used for answers."""

from __future__ import annotations

import argparse
import asyncio
import re
from pathlib import Path

from presenter.core.config import get_settings
from presenter.providers import OpenAIChatModel, PineconeRetriever

DEFAULT_INPUT_DIR = Path("knowledge")
SUPPORTED_SUFFIXES = {".txt", ".md"}
PARAGRAPH_PATTERN = re.compile(r"\n\s*\n")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Ingest knowledge documents into Pinecone")
    parser.add_argument(
        "--input-dir",
        type=Path,
        default=DEFAULT_INPUT_DIR,
        help="Directory containing .txt or .md documents to index.",
    )
    parser.add_argument(
        "--chunk-chars",
        type=int,
        default=1000,
        help="Maximum characters per indexed passage.",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=50,
        help="Vectors sent per upsert request.",
    )
    parser.add_argument(
        "--namespace",
        default=None,
        help="Optional Pinecone namespace.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Chunk documents but skip embedding and upserting.",
    )
    return parser.parse_args()


def load_documents(input_dir: Path) -> dict[str, str]:
    if not input_dir.is_dir():
        raise FileNotFoundError(f"Knowledge directory not found at {input_dir}. Supply --input-dir.")

    documents: dict[str, str] = {}
    for path in sorted(input_dir.rglob("*")):
        if path.is_file() and path.suffix.lower() in SUPPORTED_SUFFIXES:
            documents[str(path.relative_to(input_dir))] = path.read_text(encoding="utf-8")
    return documents


def chunk_text(text: str, max_chars: int) -> list[str]:
    """Group paragraphs into passages no longer than ``max_chars``.

    A single paragraph longer than the limit is split on whitespace.
    """

    chunks: list[str] = []
    current = ""
    for paragraph in PARAGRAPH_PATTERN.split(text):
        paragraph = " ".join(paragraph.split())
        if not paragraph:
            continue
        for piece in _split_long(paragraph, max_chars):
            candidate = f"{current}\n\n{piece}" if current else piece
            if len(candidate) <= max_chars or not current:
                current = candidate
            else:
                chunks.append(current)
                current = piece
    if current:
        chunks.append(current)
    return chunks


def _split_long(paragraph: str, max_chars: int) -> list[str]:
    if len(paragraph) <= max_chars:
        return [paragraph]
    pieces: list[str] = []
    current = ""
    for word in paragraph.split(" "):
        candidate = f"{current} {word}" if current else word
        if len(candidate) > max_chars and current:
            pieces.append(current)
            current = word
        else:
            current = candidate
    if current:
        pieces.append(current)
    return pieces


async def ingest(passages: list[tuple[str, str, str]], batch_size: int, namespace: str | None) -> int:
    settings = get_settings()
    embedder = OpenAIChatModel(
        settings.openai_api_key,
        settings.model_candidates,
        base_url=settings.openai_base_url,
        embedding_model=settings.openai_embedding_model,
        timeout=settings.http_timeout_seconds,
    )
    index = PineconeRetriever(
        settings.pinecone_api_key,
        embedder,
        index_name=settings.pinecone_index,
        index_host=settings.pinecone_index_host,
        control_url=settings.pinecone_control_url,
        timeout=settings.http_timeout_seconds,
    )
    embedder.ensure_configured()
    index.ensure_configured()

    total = 0
    batch: list[dict] = []
    for vector_id, source, text in passages:
        batch.append(
            {
                "id": vector_id,
                "values": await embedder.embed(text),
                "metadata": {"text": text, "source": source},
            }
        )
        if len(batch) >= batch_size:
            total += await index.upsert(batch, namespace)
            batch = []
    if batch:
        total += await index.upsert(batch, namespace)
    return total


def main() -> None:
    args = parse_args()
    documents = load_documents(args.input_dir)
    print(f"Loaded {len(documents)} documents from {args.input_dir}")

    passages: list[tuple[str, str, str]] = []
    for source, text in documents.items():
        stem = re.sub(r"[^a-zA-Z0-9_-]+", "-", source).strip("-")
        for idx, chunk in enumerate(chunk_text(text, args.chunk_chars)):
            passages.append((f"{stem}-{idx}", source, chunk))
    print(f"Prepared {len(passages)} passages")

    if args.dry_run:
        print("Dry-run enabled; skipping embedding and upsert")
        return

    upserted = asyncio.run(ingest(passages, args.batch_size, args.namespace))
    print(f"Upserted {upserted} vectors")


if __name__ == "__main__":
    main()
