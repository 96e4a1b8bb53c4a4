from rest_framework import serializers

from .models import Author, Book, BookImage, Review
from .utils import normalize_isbn, is_valid_isbn


class AuthorSerializer(serializers.ModelSerializer):
    book_count = serializers.SerializerMethodField()

    class Meta:
        model = Author
        fields = ('id', 'name', 'bio', 'book_count')

    def get_book_count(self, obj):
        return obj.books.count()


class NestedAuthorSerializer(serializers.ModelSerializer):
    """Author as written inside a book; an existing name is reused, not rejected."""

    class Meta:
        model = Author
        fields = ('id', 'name', 'bio')
        extra_kwargs = {
            'name': {'validators': []},
        }


class BookImageSerializer(serializers.ModelSerializer):
    class Meta:
        model = BookImage
        fields = ('id', 'url', 'created_at')
        read_only_fields = fields


class BookSerializer(serializers.ModelSerializer):
    author = NestedAuthorSerializer()
    images = BookImageSerializer(many=True, read_only=True)
    average_rating = serializers.FloatField(read_only=True)
    review_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Book
        fields = (
            'id', 'title', 'subtitle', 'description', 'isbn', 'published_year',
            'pages', 'author', 'images', 'average_rating', 'review_count',
            'created_at', 'updated_at',
        )
        read_only_fields = ('created_at', 'updated_at')

    def to_internal_value(self, data):
        # Normalize before the unique validator sees the value
        if hasattr(data, 'get') and data.get('isbn'):
            data = data.copy()
            data['isbn'] = normalize_isbn(data['isbn'])
        return super().to_internal_value(data)

    def validate_isbn(self, value):
        if not value:
            return None
        if not is_valid_isbn(value):
            raise serializers.ValidationError('Enter a valid 10 or 13 digit ISBN.')
        return value

    def validate_author(self, value):
        # A partial update makes the nested author partial too
        if not value.get('name'):
            raise serializers.ValidationError({'name': ['This field is required.']})
        return value

    def _resolve_author(self, author_data):
        author, _ = Author.objects.get_or_create(
            name=author_data['name'],
            defaults={'bio': author_data.get('bio', '')},
        )
        return author

    def create(self, validated_data):
        author_data = validated_data.pop('author')
        author = self._resolve_author(author_data)
        return Book.objects.create(author=author, **validated_data)

    def update(self, instance, validated_data):
        author_data = validated_data.pop('author', None)
        if author_data:
            instance.author = self._resolve_author(author_data)

        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()
        return instance


class ReviewSerializer(serializers.ModelSerializer):
    user = serializers.HiddenField(default=serializers.CurrentUserDefault())
    reviewer = serializers.ReadOnlyField(source='user.username')

    class Meta:
        model = Review
        fields = ('id', 'book', 'user', 'reviewer', 'value', 'comment', 'created_at', 'updated_at')
        read_only_fields = ('created_at', 'updated_at')

    def validate(self, attrs):
        # Reviews stay attached to the book they were written for
        if self.instance is not None and 'book' in attrs and attrs['book'] != self.instance.book:
            raise serializers.ValidationError({'book': 'A review cannot be moved to another book.'})
        return attrs


class BookLookupSerializer(serializers.Serializer):
    isbn = serializers.CharField()
    title = serializers.CharField()
    subtitle = serializers.CharField(allow_blank=True)
    authors = serializers.ListField(child=serializers.CharField())
    description = serializers.CharField(allow_blank=True)
    published_year = serializers.IntegerField(allow_null=True)
    pages = serializers.IntegerField(allow_null=True)
    cover_url = serializers.CharField(allow_blank=True)
