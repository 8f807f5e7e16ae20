from fastapi.testclient import TestClient


async def test_plan(test_client: TestClient, text_generator, alice_headers) -> None:
    text_generator.enqueue('[{type: "rewrite", param: "formal"}, {type: "translate", param: "French"}]')

    response = test_client.post("/pipelines/plan", json={"goal": "formal French"}, headers=alice_headers)
    if response.status_code != 200:
        raise AssertionError(f"Unexpected status code: {response.status_code}, response: {response.text}")
    body = response.json()
    assert [(step["kind"], step["parameter"]) for step in body["pipeline"]] == [
        ("rewrite", "formal"),
        ("translate", "French"),
    ]
    assert body["label"] == "Rewrite (formal) → Translate (French)"


async def test_plan_failure(test_client: TestClient, text_generator, alice_headers) -> None:
    text_generator.enqueue('Here is the JSON array: [{"type": "summarize"}]')

    response = test_client.post("/pipelines/plan", json={"goal": "shorter"}, headers=alice_headers)
    assert response.status_code == 502
    assert response.json() == {"error": "Failed to generate pipeline. Try again."}


async def test_plan_requires_a_token(test_client: TestClient) -> None:
    assert test_client.post("/pipelines/plan", json={"goal": "shorter"}).status_code == 401


async def test_edit_operations(test_client: TestClient, alice_headers) -> None:
    def edit(pipeline, operation):
        response = test_client.post(
            "/pipelines/edit", json={"pipeline": pipeline, "operation": operation}, headers=alice_headers
        )
        if response.status_code != 200:
            raise AssertionError(f"Unexpected status code: {response.status_code}, response: {response.text}")
        return response.json()["pipeline"]

    pipeline = edit("[]", {"op": "append", "kind": "summarize"})
    pipeline = edit(pipeline, {"op": "append", "kind": "translate", "parameter": "Dutch"})
    assert [step["kind"] for step in pipeline] == ["summarize", "translate"]

    assert edit(pipeline, {"op": "move_up", "index": 0}) == pipeline
    assert edit(pipeline, {"op": "move_down", "index": 1}) == pipeline

    swapped = edit(pipeline, {"op": "move_up", "index": 1})
    assert [step["kind"] for step in swapped] == ["translate", "summarize"]

    removed = edit(swapped, {"op": "remove", "step_id": swapped[0]["id"]})
    assert [step["kind"] for step in removed] == ["summarize"]

    assert edit(removed, {"op": "clear"}) == []


async def test_edit_rejects_unknown_kind(test_client: TestClient, alice_headers) -> None:
    response = test_client.post(
        "/pipelines/edit",
        json={"pipeline": "[]", "operation": {"op": "append", "kind": "dance"}},
        headers=alice_headers,
    )
    assert response.status_code == 422
    assert "dance" in response.json()["error"]


async def test_sign_out_revokes_token(test_client: TestClient, alice_headers, bob_headers) -> None:
    assert test_client.post("/auth/signout", headers=alice_headers).status_code == 204
    assert test_client.get("/chats", headers=alice_headers).status_code == 401
    assert test_client.get("/chats", headers=bob_headers).status_code == 200
