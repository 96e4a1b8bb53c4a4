import django_filters

from .models import Book, Review


class BookFilter(django_filters.FilterSet):
    title = django_filters.CharFilter(lookup_expr='icontains')
    author = django_filters.CharFilter(field_name='author__name', lookup_expr='icontains')
    published_after = django_filters.NumberFilter(field_name='published_year', lookup_expr='gte')
    published_before = django_filters.NumberFilter(field_name='published_year', lookup_expr='lte')

    class Meta:
        model = Book
        fields = ['title', 'author', 'isbn', 'published_year']


class ReviewFilter(django_filters.FilterSet):
    class Meta:
        model = Review
        fields = ['book', 'user', 'value']
