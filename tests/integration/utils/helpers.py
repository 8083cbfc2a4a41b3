# tests/integration/utils/helpers.py
import json

from fastapi.testclient import TestClient


# ---------- HTTP helpers (show server error bodies) ----------
def _post(client: TestClient, url: str, payload: dict | None = None) -> dict:
    r = client.post(url, json=payload or {})
    if r.status_code >= 400:
        raise AssertionError(
            f"{r.status_code} for {url}\n"
            f"Payload:\n{json.dumps(payload, indent=2)}\n"
            f"Response:\n{r.text}"
        )
    return r.json()


def _get(client: TestClient, url: str) -> dict:
    r = client.get(url)
    r.raise_for_status()
    return r.json()


def _create_session(client: TestClient, **overrides) -> dict:
    payload = {"seed": 42, "ai_enabled": False}
    payload.update(overrides)
    return _post(client, "/sessions", payload)


def _move(src: tuple[int, int], dst: tuple[int, int]) -> dict:
    return {
        "action": {
            "kind": "move",
            "src": {"r": src[0], "c": src[1]},
            "dst": {"r": dst[0], "c": dst[1]},
        }
    }


def _first_legal(client: TestClient, sid: str) -> dict:
    legal = _get(client, f"/sessions/{sid}/legal_actions")["actions"]
    assert legal, "no legal actions"
    return {"action": legal[0]["action"]}
