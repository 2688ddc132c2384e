"""Shared fixtures: an in-memory transport that records every request."""

import json

import pytest

from onenote_client.client import OneNoteClient
from onenote_client.config import ClientConfig
from onenote_client.transport import TransportResponse, classify_status

BASE_URL = "https://graph.example/v1.0/me/onenote"


class FakeTransport:
    """
    Canned responses keyed by (method, url); anything unregistered is a 404.

    ``fail`` registers an exception instance to raise instead.
    """

    def __init__(self):
        self.responses = {}
        self.calls = []

    def add(self, method, path, status=200, body=b""):
        if isinstance(body, (dict, list)):
            body = json.dumps(body)
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.responses[(method, f"{BASE_URL}/{path}")] = TransportResponse(status, body)

    def fail(self, method, path, exc):
        self.responses[(method, f"{BASE_URL}/{path}")] = exc

    def request(self, method, url, body=None, headers=None):
        self.calls.append((method, url, body))
        response = self.responses.get((method, url), TransportResponse(404, b""))
        if isinstance(response, Exception):
            raise response
        return response

    def handle_status(self, status, operation, body=b""):
        classify_status(status, operation, body)

    def methods(self):
        return [method for method, _, _ in self.calls]

    def urls(self):
        return [url for _, url, _ in self.calls]


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(transport):
    return OneNoteClient(transport=transport, config=ClientConfig(graph_url=BASE_URL))
