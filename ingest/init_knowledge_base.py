import argparse
import asyncio
import logging
import os
from typing import List

from app.dependencies import build_container
from app.logging import configure_logging
from app.settings import get_settings
from infra.parsers.resume_parser import extract_text

PROBE_QUERIES = ["solidity", "web3.js", "defi", "nft", "dao"]

log = logging.getLogger("init_knowledge_base")


async def main(extra_files: List[str], probes: List[str], top_k: int = 3) -> None:
    settings = get_settings()
    container = build_container(settings)
    log.info(f"Embedding mode: {container.embedder.mode}")

    kb = await container.bootstrap()
    manager = container.knowledge_manager

    for path in extra_files:
        with open(path, "rb") as fh:
            text = extract_text(fh.read(), path)
        if not text.strip():
            log.warning(f"Skipping {path}: no text")
            continue
        results = await manager.add_to_knowledge_base(kb.id, text, {"title": os.path.basename(path)})
        log.info(f"Ingested {len(results)} chunks from {path}")

    for query in probes:
        results = await manager.query_knowledge_base(kb.id, query, top_k)
        if not results:
            log.warning(f"Probe '{query}': no results")
            continue
        top = results[0]
        title = (top.metadata or {}).get("title", "?")
        log.info(f"Probe '{query}': top similarity {top.similarity:.3f} ({title})")

    log.info(
        f"Knowledge base '{kb.name}' ({kb.id}) initialised with "
        f"{manager.chunk_count(kb.id)} chunks")


if __name__ == "__main__":
    configure_logging()
    parser = argparse.ArgumentParser(
        description="Build the Web3 knowledge base, ingest reference texts and run probe queries")
    parser.add_argument("files", nargs="*",
                        help="Extra .txt/.pdf/.docx documents to ingest")
    parser.add_argument("--probe", action="append", default=None,
                        help="Probe query (repeatable); defaults to the built-in set")
    parser.add_argument("--top-k", type=int, default=3)
    args = parser.parse_args()
    asyncio.run(main(args.files, args.probe or PROBE_QUERIES, args.top_k))
