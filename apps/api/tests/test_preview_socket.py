from __future__ import annotations


def _receive_until(ws, message_type: str, limit: int = 50) -> list[dict]:
    seen: list[dict] = []
    for _ in range(limit):
        msg = ws.receive_json()
        seen.append(msg)
        if msg["type"] == message_type:
            return seen
    raise AssertionError(f"no {message_type!r} message in {seen!r}")


def test_preview_socket_streams_then_updates(client, backend) -> None:
    with client.websocket_connect("/ws/preview?language=de") as ws:
        ws.send_json({"type": "sourceChanged", "text": "# Hi\n\nsome text"})
        messages = _receive_until(ws, "update")

    assert messages[0] == {"type": "loading", "requestId": 1}
    chunks = [m for m in messages if m["type"] == "chunk"]
    assert "".join(c["text"] for c in chunks) == "# HI\n\nSOME TEXT"

    update = messages[-1]
    assert update["fullText"] == "# HI\n\nSOME TEXT"
    assert update["languageCode"] == "de"
    assert update["cached"] is False
    assert [line["sourceLineHint"] for line in update["lines"]] == [0, 2]
    assert update["lines"][0]["html"] == '<h1 data-line="0">HI</h1>'
    assert backend.calls == [("# Hi\n\nsome text", "de")]


def test_preview_socket_change_language_and_scroll(client, backend) -> None:
    with client.websocket_connect("/ws/preview") as ws:
        ws.send_json({"type": "sourceChanged", "text": "- a\n- b\n\nc"})
        _receive_until(ws, "update")

        ws.send_json({"type": "editorScroll", "lineIndex": 3})
        scroll = ws.receive_json()
        assert scroll == {"type": "scrollTo", "lineIndex": 2, "sourceLine": 3}

        ws.send_json({"type": "changeLanguage", "languageCode": "klingon"})
        ws.send_json({"type": "changeLanguage", "languageCode": "fr"})
        update = _receive_until(ws, "update")[-1]
        assert update["languageCode"] == "fr"

    assert [lang for _text, lang in backend.calls] == ["ja", "fr"]


def test_preview_socket_ready_reuses_cache(client, backend) -> None:
    with client.websocket_connect("/ws/preview") as ws:
        ws.send_json({"type": "sourceChanged", "text": "hello"})
        _receive_until(ws, "update")

        ws.send_json({"type": "ready"})
        update = _receive_until(ws, "update")[-1]
        assert update["cached"] is True
        assert update["fullText"] == "HELLO"

    assert len(backend.calls) == 1


def test_preview_socket_ignores_garbage(client, backend) -> None:
    with client.websocket_connect("/ws/preview") as ws:
        ws.send_text("not json")
        ws.send_json(["a", "list"])
        ws.send_json({"type": "bogus"})
        ws.send_json({"type": "sourceChanged", "text": "ok"})
        update = _receive_until(ws, "update")[-1]
        assert update["fullText"] == "OK"


def test_backend_health_reports_selected_backend(client) -> None:
    res = client.get("/health/backend")
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "ok"
    assert body["backend"] == "fake:upper"


def test_backend_health_unavailable(app, client) -> None:
    app.state.backend_factory = lambda: None
    res = client.get("/health/backend")
    assert res.status_code == 200
    assert res.json()["status"] == "unavailable"


def test_change_language_carries_over_to_new_connections(client, backend) -> None:
    with client.websocket_connect("/ws/preview") as ws:
        ws.send_json({"type": "sourceChanged", "text": "hi"})
        assert _receive_until(ws, "update")[-1]["languageCode"] == "ja"
        ws.send_json({"type": "changeLanguage", "languageCode": "de"})
        assert _receive_until(ws, "update")[-1]["languageCode"] == "de"

    with client.websocket_connect("/ws/preview") as ws:
        ws.send_json({"type": "sourceChanged", "text": "hi"})
        assert _receive_until(ws, "update")[-1]["languageCode"] == "de"

    # An explicit query param still wins for its own connection.
    with client.websocket_connect("/ws/preview?language=fr") as ws:
        ws.send_json({"type": "sourceChanged", "text": "hi"})
        assert _receive_until(ws, "update")[-1]["languageCode"] == "fr"

    assert [lang for _text, lang in backend.calls] == ["ja", "de", "de", "fr"]
    assert client.get("/languages").json()["current"] == "de"
