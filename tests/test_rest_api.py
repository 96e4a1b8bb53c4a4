import pytest

from books.models import Author, Book, Review

pytestmark = pytest.mark.django_db


def test_book_list_is_public_and_paginated(api_client, book):
    response = api_client.get("/api/books/")

    assert response.status_code == 200
    assert response.data["count"] == 1
    result = response.data["results"][0]
    assert result["title"] == "The Hobbit"
    assert result["author"]["name"] == "J.R.R. Tolkien"
    assert result["images"] == []
    assert result["average_rating"] is None
    assert result["review_count"] == 0


def test_create_book_requires_authentication(api_client, author):
    response = api_client.post(
        "/api/books/",
        {"title": "The Silmarillion", "author": {"name": author.name}},
        format="json",
    )
    assert response.status_code == 401
    assert not Book.objects.filter(title="The Silmarillion").exists()


def test_create_book_creates_nested_author(auth_client):
    response = auth_client.post(
        "/api/books/",
        {
            "title": "A Wizard of Earthsea",
            "isbn": "978-0-547-77374-2",
            "published_year": 1968,
            "author": {"name": "Ursula K. Le Guin", "bio": "Writer."},
        },
        format="json",
    )

    assert response.status_code == 201, response.data
    book = Book.objects.get(pk=response.data["id"])
    assert book.isbn == "9780547773742"
    assert book.author.name == "Ursula K. Le Guin"
    assert book.author.bio == "Writer."


def test_create_book_reuses_existing_author(auth_client, author):
    response = auth_client.post(
        "/api/books/",
        {"title": "The Silmarillion", "author": {"name": author.name, "bio": "ignored"}},
        format="json",
    )

    assert response.status_code == 201, response.data
    assert Author.objects.count() == 1
    author.refresh_from_db()
    assert author.bio == "Philologist."
    assert response.data["author"]["id"] == author.id


def test_create_book_rejects_bad_isbn(auth_client):
    response = auth_client.post(
        "/api/books/",
        {"title": "Broken", "isbn": "12345", "author": {"name": "Nobody"}},
        format="json",
    )
    assert response.status_code == 400
    assert "isbn" in response.data


def test_create_book_rejects_duplicate_isbn(auth_client, book):
    response = auth_client.post(
        "/api/books/",
        {"title": "Another Hobbit", "isbn": "978-0261102217", "author": {"name": "Someone"}},
        format="json",
    )
    assert response.status_code == 400
    assert "isbn" in response.data


def test_update_book_reassigns_author(auth_client, book):
    response = auth_client.patch(
        f"/api/books/{book.pk}/",
        {"title": "There and Back Again", "author": {"name": "Bilbo Baggins"}},
        format="json",
    )

    assert response.status_code == 200, response.data
    book.refresh_from_db()
    assert book.title == "There and Back Again"
    assert book.author.name == "Bilbo Baggins"
    assert Author.objects.filter(name="J.R.R. Tolkien").exists()


def test_update_book_without_author_keeps_it(auth_client, book, author):
    response = auth_client.patch(f"/api/books/{book.pk}/", {"pages": 320}, format="json")

    assert response.status_code == 200, response.data
    book.refresh_from_db()
    assert book.pages == 320
    assert book.author == author


def test_delete_book(auth_client, book):
    response = auth_client.delete(f"/api/books/{book.pk}/")
    assert response.status_code == 204
    assert not Book.objects.exists()


def test_filter_search_and_ordering(api_client, book, author):
    orwell = Author.objects.create(name="George Orwell")
    Book.objects.create(title="Animal Farm", author=orwell, published_year=1945)
    Book.objects.create(title="Nineteen Eighty-Four", author=orwell, published_year=1949)

    by_author = api_client.get("/api/books/", {"author": "orwell"})
    assert [b["title"] for b in by_author.data["results"]] == ["Animal Farm", "Nineteen Eighty-Four"]

    after = api_client.get("/api/books/", {"published_after": 1940})
    assert after.data["count"] == 2

    before = api_client.get("/api/books/", {"published_before": 1940})
    assert [b["title"] for b in before.data["results"]] == ["The Hobbit"]

    search = api_client.get("/api/books/", {"search": "tolkien"})
    assert [b["title"] for b in search.data["results"]] == ["The Hobbit"]

    ordered = api_client.get("/api/books/", {"ordering": "-published_year"})
    assert [b["title"] for b in ordered.data["results"]] == [
        "Nineteen Eighty-Four", "Animal Farm", "The Hobbit",
    ]


def test_author_endpoint(api_client, book):
    response = api_client.get("/api/authors/")
    assert response.status_code == 200
    assert response.data["results"][0]["book_count"] == 1


def test_invalid_token_is_rejected(api_client):
    api_client.credentials(HTTP_AUTHORIZATION="JWT not-a-token")
    response = api_client.get("/api/books/")
    assert response.status_code == 401


def test_other_authorization_schemes_are_ignored(api_client, book):
    api_client.credentials(HTTP_AUTHORIZATION="Bearer abc")
    response = api_client.get("/api/books/")
    assert response.status_code == 200


def test_create_review(auth_client, book, user):
    response = auth_client.post(
        "/api/reviews/",
        {"book": book.pk, "value": 5, "comment": "Loved it"},
        format="json",
    )

    assert response.status_code == 201, response.data
    assert response.data["reviewer"] == "frodo"
    review = Review.objects.get()
    assert review.user == user
    assert book.average_rating == 5


def test_review_value_must_be_in_range(auth_client, book):
    response = auth_client.post("/api/reviews/", {"book": book.pk, "value": 6}, format="json")
    assert response.status_code == 400
    assert "value" in response.data


def test_second_review_of_same_book_is_rejected(auth_client, book, user):
    Review.objects.create(book=book, user=user, value=3)
    response = auth_client.post("/api/reviews/", {"book": book.pk, "value": 4}, format="json")
    assert response.status_code == 400
    assert Review.objects.count() == 1


def test_only_owner_can_change_review(auth_client, book, other_user):
    review = Review.objects.create(book=book, user=other_user, value=2)

    response = auth_client.patch(f"/api/reviews/{review.pk}/", {"value": 5}, format="json")
    assert response.status_code == 403

    response = auth_client.delete(f"/api/reviews/{review.pk}/")
    assert response.status_code == 403
    review.refresh_from_db()
    assert review.value == 2


def test_owner_can_update_review(auth_client, book, user):
    review = Review.objects.create(book=book, user=user, value=2)

    response = auth_client.patch(f"/api/reviews/{review.pk}/", {"value": 4}, format="json")
    assert response.status_code == 200, response.data
    review.refresh_from_db()
    assert review.value == 4


def test_book_reviews_action(api_client, book, user, other_user):
    Review.objects.create(book=book, user=user, value=5)
    Review.objects.create(book=book, user=other_user, value=3)

    response = api_client.get(f"/api/books/{book.pk}/reviews/")
    assert response.status_code == 200
    assert response.data["count"] == 2
    assert {r["reviewer"] for r in response.data["results"]} == {"frodo", "sam"}


def test_partial_update_with_author_bio_only_needs_a_name(auth_client, book, author):
    response = auth_client.patch(f"/api/books/{book.pk}/", {"author": {"bio": "new"}}, format="json")

    assert response.status_code == 400
    assert "name" in response.data["author"]
    book.refresh_from_db()
    assert book.author == author


def test_filter_by_title_and_isbn(api_client, book, author):
    Book.objects.create(title="The Silmarillion", author=author, isbn="9780261102736")

    by_title = api_client.get("/api/books/", {"title": "silma"})
    assert [b["title"] for b in by_title.data["results"]] == ["The Silmarillion"]

    by_isbn = api_client.get("/api/books/", {"isbn": "9780261102217"})
    assert [b["title"] for b in by_isbn.data["results"]] == ["The Hobbit"]


def test_author_search_and_ordering(api_client, author):
    Author.objects.create(name="Agatha Christie")
    Author.objects.create(name="George Orwell")

    searched = api_client.get("/api/authors/", {"search": "orw"})
    assert [a["name"] for a in searched.data["results"]] == ["George Orwell"]

    ordered = api_client.get("/api/authors/", {"ordering": "-name"})
    assert [a["name"] for a in ordered.data["results"]] == [
        "J.R.R. Tolkien", "George Orwell", "Agatha Christie",
    ]


def test_review_filters_and_ordering(api_client, book, author, user, other_user):
    animal_farm = Book.objects.create(title="Animal Farm", author=author)
    Review.objects.create(book=book, user=user, value=5)
    Review.objects.create(book=book, user=other_user, value=2)
    Review.objects.create(book=animal_farm, user=user, value=3)

    by_book = api_client.get("/api/reviews/", {"book": animal_farm.pk})
    assert [r["value"] for r in by_book.data["results"]] == [3]

    by_user = api_client.get("/api/reviews/", {"user": other_user.pk})
    assert [r["reviewer"] for r in by_user.data["results"]] == ["sam"]

    by_value = api_client.get("/api/reviews/", {"value": 5})
    assert by_value.data["count"] == 1

    ordered = api_client.get("/api/reviews/", {"ordering": "value"})
    assert [r["value"] for r in ordered.data["results"]] == [2, 3, 5]


def test_expired_token_is_rejected(api_client, user, monkeypatch):
    from datetime import timedelta

    from graphql_jwt.settings import jwt_settings
    from graphql_jwt.shortcuts import get_token

    monkeypatch.setattr(jwt_settings, "JWT_EXPIRATION_DELTA", timedelta(seconds=-60))
    expired = get_token(user)

    api_client.credentials(HTTP_AUTHORIZATION=f"JWT {expired}")
    response = api_client.get("/api/books/")
    assert response.status_code == 401


def test_jwt_header_without_token_is_rejected(api_client):
    api_client.credentials(HTTP_AUTHORIZATION="JWT")
    response = api_client.get("/api/books/")
    assert response.status_code == 401


def test_deleting_image_of_another_book_is_not_found(auth_client, book, author, monkeypatch):
    from books.models import BookImage

    other = Book.objects.create(title="Animal Farm", author=author)
    image = BookImage.objects.create(book=other, url="https://res.cloudinary.test/z.png", public_id="libby/books/9/z")
    destroyed = []
    monkeypatch.setattr("cloudinary.uploader.destroy", lambda public_id, **kw: destroyed.append(public_id))

    response = auth_client.delete(f"/api/books/{book.pk}/images/{image.pk}/")

    assert response.status_code == 404
    assert destroyed == []
    assert BookImage.objects.filter(pk=image.pk).exists()


def test_review_cannot_move_to_another_book(auth_client, book, author, user):
    other = Book.objects.create(title="Animal Farm", author=author)
    review = Review.objects.create(book=book, user=user, value=4)

    response = auth_client.patch(f"/api/reviews/{review.pk}/", {"book": other.pk}, format="json")

    assert response.status_code == 400
    assert "book" in response.data
    review.refresh_from_db()
    assert review.book == book
