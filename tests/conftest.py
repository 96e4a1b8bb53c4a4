import json

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from graphql_jwt.shortcuts import get_token
from rest_framework.test import APIClient

from books.models import Author, Book


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def user(db):
    return get_user_model().objects.create_user(username="frodo", email="frodo@shire.test", password="ring-bearer-9")


@pytest.fixture
def other_user(db):
    return get_user_model().objects.create_user(username="sam", email="sam@shire.test", password="gardener-pass-7")


@pytest.fixture
def token(user):
    return get_token(user)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def auth_client(token):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"JWT {token}")
    return client


@pytest.fixture
def author(db):
    return Author.objects.create(name="J.R.R. Tolkien", bio="Philologist.")


@pytest.fixture
def book(author):
    return Book.objects.create(
        title="The Hobbit",
        author=author,
        isbn="9780261102217",
        published_year=1937,
        pages=310,
    )


@pytest.fixture
def graphql(client):
    """Post a GraphQL document; pass ``token`` to send a JWT header."""

    def run(query, variables=None, token=None):
        headers = {}
        if token:
            headers["HTTP_AUTHORIZATION"] = f"JWT {token}"
        response = client.post(
            "/graphql/",
            data=json.dumps({"query": query, "variables": variables or {}}),
            content_type="application/json",
            **headers,
        )
        return response.json()

    return run
