#!/usr/bin/env uv run
# /// script
# requires-python = ">=3.9"
# dependencies = [
#     "httpstash",
# ]
#
# [tool.uv.sources]
# httpstash = { path = "../", editable = true }
# ///

import time

import httpx

from httpstash import Headers, Request, Response, StoreOptions, SyncCacheStore, SyncInMemoryClient, is_fresh

store = SyncCacheStore(client=SyncInMemoryClient(), options=StoreOptions(ttl=60))


# httpx hands back a decoded body, so its framing headers no longer describe it
DECODED_BODY_HEADERS = ("content-encoding", "content-length")


def from_origin(origin: httpx.Response) -> Response:
    return Response(
        status_code=origin.status_code,
        headers=Headers(
            {
                key: origin.headers.get_list(key)
                for key in origin.headers.keys()
                if key.lower() not in DECODED_BODY_HEADERS
            }
        ),
        content=origin.content,
    )


def fetch(client: httpx.Client, url: str) -> Response:
    request = Request(method="GET", url=url, headers=Headers({"accept": "text/html"}))

    cached = store.lookup(request)
    if cached is not None and is_fresh(cached):
        print(f"✅ From cache: {url}")
        return cached

    # Only one worker fetches a given URL from the origin at a time
    while not store.lock(request):
        time.sleep(0.05)
    try:
        origin = client.get(url, headers=dict(request.headers))
        response = from_origin(origin)
        store.write(request, response)
        print(f"🌐 From origin: {url}")
        return response
    finally:
        store.unlock(request)


if __name__ == "__main__":
    url = "https://www.example.com/"
    with httpx.Client() as client:
        fetch(client, url)
        fetch(client, url)
    store.purge(url)
    print(f"🧹 Purged: {url}, cached again: {store.lookup(Request(method='GET', url=url)) is not None}")
