from django.shortcuts import get_object_or_404
from rest_framework import filters, permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from .filters import BookFilter, ReviewFilter
from .models import Author, Book, Review
from .permissions import IsOwnerOrReadOnly
from .serializers import (
    AuthorSerializer,
    BookImageSerializer,
    BookLookupSerializer,
    BookSerializer,
    ReviewSerializer,
)
from .services import delete_book_image, lookup_book_by_isbn, upload_book_image
from .utils import normalize_isbn, is_valid_isbn


class AuthorViewSet(viewsets.ModelViewSet):
    queryset = Author.objects.prefetch_related('books')
    serializer_class = AuthorSerializer
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['name']
    ordering_fields = ['name', 'created_at']


class BookViewSet(viewsets.ModelViewSet):
    queryset = Book.objects.select_related('author').prefetch_related('images')
    serializer_class = BookSerializer
    filterset_class = BookFilter
    search_fields = ['title', 'subtitle', 'description', 'author__name']
    ordering_fields = ['title', 'published_year', 'created_at']

    @action(detail=True, methods=['post'], url_path='images')
    def upload_image(self, request, pk=None):
        """Upload a cover or page image (multipart field ``image``)."""
        book = self.get_object()
        image_file = request.FILES.get('image')
        if image_file is None:
            return Response({'image': ['No image file was submitted.']}, status=status.HTTP_400_BAD_REQUEST)

        image = upload_book_image(book, image_file)
        return Response(BookImageSerializer(image).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['delete'], url_path=r'images/(?P<image_id>\d+)')
    def delete_image(self, request, pk=None, image_id=None):
        book = self.get_object()
        image = get_object_or_404(book.images, pk=image_id)
        delete_book_image(image)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['get'])
    def reviews(self, request, pk=None):
        book = self.get_object()
        queryset = book.reviews.select_related('user')
        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = ReviewSerializer(page, many=True, context=self.get_serializer_context())
            return self.get_paginated_response(serializer.data)
        serializer = ReviewSerializer(queryset, many=True, context=self.get_serializer_context())
        return Response(serializer.data)

    @action(detail=False, methods=['get'])
    def lookup(self, request):
        """Fetch book metadata by ISBN from Google Books to prefill a new book."""
        isbn = normalize_isbn(request.query_params.get('isbn', ''))
        if not is_valid_isbn(isbn):
            return Response({'isbn': ['Enter a valid 10 or 13 digit ISBN.']}, status=status.HTTP_400_BAD_REQUEST)

        result = lookup_book_by_isbn(isbn)
        if result is None:
            return Response({'detail': f'No book found for ISBN {isbn}.'}, status=status.HTTP_404_NOT_FOUND)
        return Response(BookLookupSerializer(result).data)


class ReviewViewSet(viewsets.ModelViewSet):
    queryset = Review.objects.select_related('user', 'book')
    serializer_class = ReviewSerializer
    permission_classes = [permissions.IsAuthenticatedOrReadOnly, IsOwnerOrReadOnly]
    filterset_class = ReviewFilter
    ordering_fields = ['created_at', 'value']
