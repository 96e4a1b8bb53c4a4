import random

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from books.models import Author, Book, Review

CATALOG = {
    ("J.R.R. Tolkien", "English writer and philologist."): [
        ("The Hobbit", "9780261102217", 1937, 310),
        ("The Fellowship of the Ring", "9780261102354", 1954, 423),
        ("The Two Towers", "9780261102361", 1954, 352),
    ],
    ("George Orwell", "English novelist and essayist."): [
        ("Nineteen Eighty-Four", "9780451524935", 1949, 328),
        ("Animal Farm", "9780451526342", 1945, 112),
    ],
    ("Agatha Christie", "English writer of detective novels."): [
        ("Murder on the Orient Express", "9780062693662", 1934, 256),
        ("And Then There Were None", "9780062073488", 1939, 272),
    ],
    ("Ursula K. Le Guin", "American author of speculative fiction."): [
        ("A Wizard of Earthsea", "9780547773742", 1968, 183),
        ("The Left Hand of Darkness", "9780441478125", 1969, 304),
    ],
}

COMMENTS = {
    1: "Could not finish it.",
    2: "Had its moments.",
    3: "A solid read.",
    4: "Really enjoyed this one.",
    5: "An all-time favourite.",
}


class Command(BaseCommand):
    help = "Seeds the database with sample authors, books, readers and reviews"

    def add_arguments(self, parser):
        parser.add_argument('--users', type=int, default=5, help='Number of sample readers to create')
        parser.add_argument('--seed', type=int, default=None, help='Random seed for repeatable reviews')

    @transaction.atomic
    def handle(self, *args, **options):
        User = get_user_model()
        rng = random.Random(options['seed'])

        self.stdout.write(self.style.WARNING('Deleting old data...'))
        Review.objects.all().delete()
        Book.objects.all().delete()
        Author.objects.all().delete()
        # Only the sample readers, never real accounts
        User.objects.filter(username__startswith='reader').delete()

        self.stdout.write(self.style.SUCCESS('Creating Authors and Books...'))
        books = []
        for (name, bio), titles in CATALOG.items():
            author = Author.objects.create(name=name, bio=bio)
            for title, isbn, year, pages in titles:
                books.append(Book.objects.create(
                    title=title,
                    author=author,
                    isbn=isbn,
                    published_year=year,
                    pages=pages,
                ))
        self.stdout.write(self.style.SUCCESS(f'Created {len(books)} books.'))

        self.stdout.write(self.style.SUCCESS('Creating Readers and Reviews...'))
        review_count = 0
        for i in range(1, options['users'] + 1):
            user = User.objects.create_user(username=f"reader{i}", password="libby-reader-pass")
            for book in rng.sample(books, min(4, len(books))):
                value = rng.randint(1, 5)
                Review.objects.create(user=user, book=book, value=value, comment=COMMENTS[value])
                review_count += 1

        self.stdout.write(self.style.SUCCESS(f'Created {options["users"]} readers and {review_count} reviews.'))
        self.stdout.write(self.style.SUCCESS('Successfully seeded database!'))
