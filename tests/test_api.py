import time

import pytest
from fastapi.testclient import TestClient

from app.main import app

EVALUATE_BODY = {
    "resume_data": {"skills": ["solidity", "TypeScript"]},
    "job_requirement": {
        "title": "Smart Contract Engineer",
        "skills": {"required": ["Solidity", "React"], "preferred": []},
    },
}


@pytest.fixture(scope="module")
def client():
    with TestClient(app) as c:
        yield c


def test_health(client):
    body = client.get("/health").json()
    assert body["status"] == "ok"
    assert body["embedding_mode"] == "mock"
    assert body["llm_configured"] is False
    assert body["knowledge_base"]["name"] == "Web3 Skills Knowledge Base"


def test_bootstrapped_knowledge_base_is_listed(client):
    bases = client.get("/knowledge-bases").json()
    web3 = next(kb for kb in bases if kb["name"] == "Web3 Skills Knowledge Base")
    assert web3["skill_count"] == 14
    assert web3["chunk_count"] >= 5

    detail = client.get(f"/knowledge-bases/{web3['id']}").json()
    assert detail["id"] == web3["id"]


def test_unknown_knowledge_base_is_404(client):
    assert client.get("/knowledge-bases/nope").status_code == 404
    resp = client.post("/knowledge-bases/nope/documents", json={"text": "hello"})
    assert resp.status_code == 404
    assert "nope" in resp.json()["detail"]


def test_query_unknown_knowledge_base_is_empty(client):
    resp = client.post("/knowledge-bases/nope/query", json={"query": "x"})
    assert resp.status_code == 200
    assert resp.json() == []


def test_create_ingest_and_query(client):
    created = client.post("/knowledge-bases", json={"name": "Audits", "description": "audit notes"})
    assert created.status_code == 201
    kb_id = created.json()["id"]

    added = client.post(f"/knowledge-bases/{kb_id}/documents",
                        json={"text": "Reentrancy guards protect withdraw functions", "metadata": {"title": "audit"}})
    assert added.json() == {"knowledge_base_id": kb_id, "chunks_added": 1, "sources": ["mock"]}

    results = client.post(f"/knowledge-bases/{kb_id}/query", json={"query": "reentrancy", "top_k": 3}).json()
    assert len(results) == 1
    assert results[0]["metadata"] == {"title": "audit", "chunk_index": 0}


def test_knowledge_context(client):
    resp = client.post("/knowledge/context", json={"query": "solidity", "max_results": 5})
    assert "Solidity (blockchain):" in resp.json()["context"]


def test_embeddings(client):
    body = client.post("/embeddings", json={"text": "ethers.js"}).json()
    assert body["success"] is True
    assert body["source"] == "mock"
    assert body["dimension"] == len(body["embedding"]) == 32


def test_embeddings_rejects_empty_text(client):
    assert client.post("/embeddings", json={"text": "   "}).status_code == 400


def test_evaluate_sync_falls_back_without_credential(client):
    body = client.post("/evaluate/sync", json=EVALUATE_BODY).json()
    assert body["source"] == "fallback"
    assert [m["skill"] for m in body["skill_matches"]] == ["Solidity"]
    assert body["missing_skills"] == ["React"]


def test_evaluate_job_completes(client):
    queued = client.post("/evaluate", json=EVALUATE_BODY).json()
    assert queued["status"] == "queued"

    for _ in range(100):
        job = client.get(f"/result/{queued['id']}").json()
        if job["status"] in ("completed", "failed"):
            break
        time.sleep(0.05)
    assert job["status"] == "completed"
    assert job["result"]["missing_skills"] == ["React"]


def test_finished_jobs_release_their_tasks(client):
    container = app.state.container
    queued = client.post("/evaluate", json=EVALUATE_BODY).json()
    for _ in range(100):
        done = client.get(f"/result/{queued['id']}").json()["status"] in ("completed", "failed")
        if done and not container.background_tasks:
            break
        time.sleep(0.05)
    assert container.background_tasks == set()


def test_startup_runs_through_lifespan(client):
    assert app.router.on_startup == []
    assert app.state.container.knowledge_manager.is_loaded


def test_unknown_job_is_404(client):
    assert client.get("/result/job_missing").status_code == 404


def test_resume_upload(client):
    files = {"file": ("cv.txt", b"Carol\nSkills: Solidity, Rust\n", "text/plain")}
    body = client.post("/resume", files=files).json()
    assert body["error"] is None
    assert body["data"]["skills"] == ["Solidity", "Rust"]


def test_resume_upload_rejects_unsupported_type(client):
    files = {"file": ("cv.png", b"\x89PNG", "image/png")}
    resp = client.post("/resume", files=files)
    assert resp.status_code == 400
    assert "Unsupported file type" in resp.json()["error"]
