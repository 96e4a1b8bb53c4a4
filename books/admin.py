from django.contrib import admin
from .models import Author, Book, BookImage, Review
from .utils import rating_stars


class BookImageInline(admin.TabularInline):
    model = BookImage
    extra = 0
    readonly_fields = ('url', 'public_id', 'created_at')


class ReviewInline(admin.TabularInline):
    model = Review
    extra = 0
    fields = ('user', 'value', 'comment', 'created_at')
    readonly_fields = ('created_at',)


@admin.register(Author)
class AuthorAdmin(admin.ModelAdmin):
    list_display = ('name', 'created_at')
    search_fields = ('name',)


@admin.register(Book)
class BookAdmin(admin.ModelAdmin):
    list_display = ('title', 'author', 'isbn', 'published_year')
    list_filter = ('published_year',)
    search_fields = ('title', 'isbn', 'author__name')
    list_select_related = ('author',)
    inlines = [BookImageInline, ReviewInline]


@admin.register(BookImage)
class BookImageAdmin(admin.ModelAdmin):
    list_display = ('book', 'public_id', 'created_at')
    list_filter = ('created_at',)


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ('book', 'user', 'stars', 'created_at')
    list_filter = ('value', 'created_at')
    search_fields = ('book__title', 'user__username')

    @admin.display(description='Rating', ordering='value')
    def stars(self, obj):
        return rating_stars(obj.value)
