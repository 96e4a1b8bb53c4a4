import logging
import uuid

import cloudinary.uploader
import requests
from django.core.cache import cache

from books.exceptions import BookLookupUnavailable, ImageUploadError
from books.models import BookImage

logger = logging.getLogger(__name__)

GOOGLE_BOOKS_URL = "https://www.googleapis.com/books/v1/volumes"
LOOKUP_CACHE_SECONDS = 86400
IMAGE_KEY_PREFIX = "libby/books"

# Create a session for connection pooling (reuses TCP connections)
_session = requests.Session()


def upload_book_image(book, file):
    """
    Upload an image for a book to Cloudinary and record it.

    A random key is generated for every upload so re-uploading the same file
    never overwrites an existing object. Nothing is written to the database
    when the upload fails.
    """
    key = uuid.uuid4().hex
    public_id = f"{IMAGE_KEY_PREFIX}/{book.pk}/{key}"

    try:
        result = cloudinary.uploader.upload(
            file,
            public_id=public_id,
            resource_type="image",
            overwrite=False,
        )
    except Exception as exc:
        logger.exception("Image upload failed for book %s (key %s)", book.pk, key)
        raise ImageUploadError() from exc

    image = BookImage.objects.create(
        book=book,
        url=result["secure_url"],
        public_id=result.get("public_id", public_id),
    )
    logger.info("Stored image %s for book %s", image.public_id, book.pk)
    return image


def delete_book_image(image):
    """Remove the stored object first, then the record pointing at it."""
    try:
        cloudinary.uploader.destroy(image.public_id, resource_type="image")
    except Exception as exc:
        logger.exception("Image removal failed for %s", image.public_id)
        raise ImageUploadError("The image could not be removed from storage.") from exc

    image.delete()
    logger.info("Removed image %s", image.public_id)


def lookup_book_by_isbn(isbn):
    """
    Looks up a book on the Google Books API by ISBN.
    Results (including "not found") are cached for 24 hours.
    Returns a dict of metadata, or None when Google has no match.
    """
    cache_key = f"google_books_isbn:{isbn}"

    cached = cache.get(cache_key)
    if cached is not None:
        # An empty dict marks a cached miss
        return cached or None

    params = {'q': f'isbn:{isbn}', 'maxResults': 1}

    try:
        response = _session.get(GOOGLE_BOOKS_URL, params=params, timeout=5)
    except requests.exceptions.RequestException as exc:
        logger.warning("Google Books lookup for %s failed: %s", isbn, exc)
        raise BookLookupUnavailable() from exc

    if response.status_code != 200:
        logger.warning("Google Books lookup for %s returned HTTP %s", isbn, response.status_code)
        raise BookLookupUnavailable()

    try:
        payload = response.json()
    except ValueError as exc:
        logger.warning("Google Books lookup for %s returned a non-JSON body", isbn)
        raise BookLookupUnavailable() from exc

    items = payload.get('items', [])
    if not items:
        cache.set(cache_key, {}, LOOKUP_CACHE_SECONDS)
        return None

    volume_info = items[0].get('volumeInfo', {})
    published_date = volume_info.get('publishedDate', '')
    year = published_date[:4]

    result = {
        'isbn': isbn,
        'title': volume_info.get('title', ''),
        'subtitle': volume_info.get('subtitle', ''),
        'authors': volume_info.get('authors', []),
        'description': volume_info.get('description', ''),
        'published_year': int(year) if year.isdigit() else None,
        'pages': volume_info.get('pageCount'),
        'cover_url': volume_info.get('imageLinks', {}).get('thumbnail', ''),
    }

    cache.set(cache_key, result, LOOKUP_CACHE_SECONDS)
    return result
