from rest_framework import status
from rest_framework.exceptions import APIException


class ImageUploadError(APIException):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = 'The image could not be stored. Please try again later.'
    default_code = 'image_upload_failed'


class BookLookupUnavailable(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'Book lookup service is unavailable.'
    default_code = 'book_lookup_unavailable'
