from django.db import models
from django.db.models import Avg
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator

RATING_CHOICES = [(i, str(i)) for i in range(1, 6)]


class Author(models.Model):
    name = models.CharField(max_length=255, unique=True)
    bio = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class Book(models.Model):
    title = models.CharField(max_length=255)
    subtitle = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)
    isbn = models.CharField(max_length=13, unique=True, null=True, blank=True)
    published_year = models.PositiveIntegerField(null=True, blank=True)
    pages = models.PositiveIntegerField(null=True, blank=True)
    author = models.ForeignKey(Author, on_delete=models.CASCADE, related_name='books')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['title']
        indexes = [
            models.Index(fields=['published_year'], name='books_book_publish_5c4a1e_idx'),
        ]

    def __str__(self):
        return self.title

    @property
    def average_rating(self):
        """Mean review value rounded to two places, or None when unreviewed."""
        avg = self.reviews.aggregate(avg=Avg('value'))['avg']
        if avg is None:
            return None
        return round(avg, 2)

    @property
    def review_count(self):
        return self.reviews.count()


class BookImage(models.Model):
    book = models.ForeignKey(Book, on_delete=models.CASCADE, related_name='images')
    url = models.URLField(max_length=500)
    # Key of the object in the image store, needed to delete it remotely
    public_id = models.CharField(max_length=255, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.book.title}: {self.public_id}"


class Review(models.Model):
    book = models.ForeignKey(Book, on_delete=models.CASCADE, related_name='reviews')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='reviews')
    value = models.PositiveSmallIntegerField(
        choices=RATING_CHOICES,
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    comment = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']
        unique_together = ('user', 'book')
        indexes = [
            models.Index(fields=['book', 'value'], name='books_revie_book_id_3f9b2d_idx'),
        ]

    def __str__(self):
        return f"{self.user.username} - {self.book.title}: {self.value}"
