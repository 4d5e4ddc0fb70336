import concurrent.futures

import http_client


def test_client_is_shared_across_threads(monkeypatch):
    monkeypatch.setattr(http_client, "_client", None)

    with concurrent.futures.ThreadPoolExecutor(max_workers=8) as pool:
        clients = list(pool.map(lambda _: http_client.get_client(), range(32)))

    assert len({id(c) for c in clients}) == 1
    http_client.close_client()
    assert http_client._client is None


def test_rapidapi_headers(monkeypatch):
    monkeypatch.setattr(http_client.settings, "RAPIDAPI_KEY", "k")
    assert http_client.rapidapi_headers("exercisedb.p.rapidapi.com") == {
        "x-rapidapi-host": "exercisedb.p.rapidapi.com",
        "x-rapidapi-key": "k",
    }
