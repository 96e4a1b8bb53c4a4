import csv
import sys

from django.core.management.base import BaseCommand
from django.db.models import Avg, Count

from books.models import Book


class Command(BaseCommand):
    help = 'Export books with their author and review statistics to CSV'

    fieldnames = [
        'id',
        'title',
        'subtitle',
        'author',
        'isbn',
        'published_year',
        'pages',
        'review_count',
        'average_rating',
        'image_count',
        'created_at',
    ]

    def add_arguments(self, parser):
        parser.add_argument(
            '--output',
            type=str,
            default=None,
            help='Output CSV filename (default: stdout)',
        )

    def handle(self, *args, **options):
        output_file = options['output']

        books = (
            Book.objects.select_related('author')
            .annotate(
                num_reviews=Count('reviews', distinct=True),
                avg_rating=Avg('reviews__value'),
                num_images=Count('images', distinct=True),
            )
            .order_by('id')
        )

        if output_file:
            with open(output_file, 'w', newline='', encoding='utf-8') as fh:
                count = self.write_rows(fh, books)
            self.stdout.write(self.style.SUCCESS(f'Successfully exported {count} books to {output_file}'))
        else:
            count = self.write_rows(self.stdout, books)
            # Keep the summary off stdout so the CSV stays clean
            sys.stderr.write(f'\nSuccessfully exported {count} books\n')

    def write_rows(self, fh, books):
        writer = csv.DictWriter(fh, fieldnames=self.fieldnames)
        writer.writeheader()

        count = 0
        for book in books:
            writer.writerow({
                'id': book.id,
                'title': book.title,
                'subtitle': book.subtitle,
                'author': book.author.name,
                'isbn': book.isbn or '',
                'published_year': book.published_year or '',
                'pages': book.pages or '',
                'review_count': book.num_reviews,
                'average_rating': f'{book.avg_rating:.2f}' if book.avg_rating is not None else '',
                'image_count': book.num_images,
                'created_at': book.created_at.strftime('%Y-%m-%d %H:%M:%S'),
            })
            count += 1
        return count
