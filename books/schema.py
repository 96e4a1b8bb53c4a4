import graphene
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.db.models import Q
from graphene_django import DjangoObjectType
from graphql import GraphQLError
from graphql_jwt.decorators import login_required

from .mixins import AuthRequiredMixin, OwnerRequiredMixin
from .models import Author, Book, BookImage, Review
from .utils import normalize_isbn, is_valid_isbn


class UserType(DjangoObjectType):
    email = graphene.String()

    class Meta:
        model = get_user_model()
        fields = ('id', 'username', 'email', 'reviews')

    def resolve_email(self, info):
        # Only the account holder and staff see addresses
        viewer = info.context.user
        if viewer.is_authenticated and (viewer.pk == self.pk or viewer.is_staff):
            return self.email
        return None


class AuthorType(DjangoObjectType):
    class Meta:
        model = Author
        fields = ('id', 'name', 'bio', 'books', 'created_at')


class BookImageType(DjangoObjectType):
    class Meta:
        model = BookImage
        fields = ('id', 'url', 'created_at')


class ReviewType(DjangoObjectType):
    class Meta:
        model = Review
        fields = ('id', 'book', 'user', 'value', 'comment', 'created_at', 'updated_at')
        convert_choices_to_enum = False


class BookType(DjangoObjectType):
    average_rating = graphene.Float()
    review_count = graphene.Int()

    class Meta:
        model = Book
        fields = (
            'id', 'title', 'subtitle', 'description', 'isbn', 'published_year',
            'pages', 'author', 'images', 'reviews', 'created_at', 'updated_at',
        )

    def resolve_average_rating(self, info):
        return self.average_rating

    def resolve_review_count(self, info):
        return self.review_count


class Query(graphene.ObjectType):
    all_books = graphene.List(
        BookType,
        search=graphene.String(),
        first=graphene.Int(),
        skip=graphene.Int(),
    )
    book = graphene.Field(BookType, id=graphene.ID(required=True))
    all_authors = graphene.List(AuthorType)
    author = graphene.Field(AuthorType, id=graphene.ID(required=True))
    reviews = graphene.List(ReviewType, book_id=graphene.ID())
    me = graphene.Field(UserType)

    def resolve_all_books(self, info, search=None, first=None, skip=None):
        if (first is not None and first < 0) or (skip is not None and skip < 0):
            raise GraphQLError('first and skip must not be negative.')

        qs = Book.objects.select_related('author')

        if search:
            qs = qs.filter(
                Q(title__icontains=search) |
                Q(description__icontains=search) |
                Q(author__name__icontains=search)
            )

        if skip:
            qs = qs[skip:]
        if first:
            qs = qs[:first]

        return qs

    def resolve_book(self, info, id):
        return Book.objects.select_related('author').filter(pk=id).first()

    def resolve_all_authors(self, info):
        return Author.objects.all()

    def resolve_author(self, info, id):
        return Author.objects.filter(pk=id).first()

    def resolve_reviews(self, info, book_id=None):
        qs = Review.objects.select_related('user', 'book')
        if book_id is not None:
            qs = qs.filter(book_id=book_id)
        return qs

    @login_required
    def resolve_me(self, info):
        return info.context.user


NON_NULL_BOOK_FIELDS = ('title', 'subtitle', 'description')


def _clean_isbn(isbn):
    if not isbn:
        return None
    isbn = normalize_isbn(isbn)
    if not is_valid_isbn(isbn):
        raise GraphQLError('Enter a valid 10 or 13 digit ISBN.')
    return isbn


def _get_book(book_id):
    try:
        return Book.objects.get(pk=book_id)
    except Book.DoesNotExist:
        raise GraphQLError(f'Book {book_id} does not exist.')


def _check_rating(value):
    if value is not None and not 1 <= value <= 5:
        raise GraphQLError('Rating must be between 1 and 5.')


def _check_positive(**values):
    for name, value in values.items():
        if value is not None and value < 0:
            raise GraphQLError(f'{name} must not be negative.')


class CreateUser(graphene.Mutation):
    user = graphene.Field(UserType)

    class Arguments:
        username = graphene.String(required=True)
        password = graphene.String(required=True)
        email = graphene.String(required=True)

    def mutate(self, info, username, password, email):
        User = get_user_model()
        if User.objects.filter(username=username).exists():
            raise GraphQLError('A user with that username already exists.')

        user = User(username=username, email=email)
        try:
            validate_password(password, user)
        except ValidationError as e:
            raise GraphQLError(' '.join(e.messages))
        user.set_password(password)
        user.save()

        return CreateUser(user=user)


class CreateAuthor(AuthRequiredMixin, graphene.Mutation):
    author = graphene.Field(AuthorType)

    class Arguments:
        name = graphene.String(required=True)
        bio = graphene.String()

    @classmethod
    def mutate(cls, root, info, name, bio=''):
        cls.get_user(info)
        if Author.objects.filter(name=name).exists():
            raise GraphQLError(f'Author "{name}" already exists.')
        author = Author.objects.create(name=name, bio=bio or '')
        return CreateAuthor(author=author)


class CreateBook(AuthRequiredMixin, graphene.Mutation):
    book = graphene.Field(BookType)

    class Arguments:
        title = graphene.String(required=True)
        author_name = graphene.String(required=True)
        subtitle = graphene.String()
        description = graphene.String()
        isbn = graphene.String()
        published_year = graphene.Int()
        pages = graphene.Int()

    @classmethod
    def mutate(cls, root, info, title, author_name, isbn=None, **kwargs):
        cls.get_user(info)
        _check_positive(publishedYear=kwargs.get('published_year'), pages=kwargs.get('pages'))
        isbn = _clean_isbn(isbn)
        if isbn and Book.objects.filter(isbn=isbn).exists():
            raise GraphQLError(f'A book with ISBN {isbn} already exists.')

        author, _ = Author.objects.get_or_create(name=author_name)
        book = Book.objects.create(
            title=title,
            author=author,
            isbn=isbn,
            subtitle=kwargs.get('subtitle') or '',
            description=kwargs.get('description') or '',
            published_year=kwargs.get('published_year'),
            pages=kwargs.get('pages'),
        )
        return CreateBook(book=book)


class UpdateBook(AuthRequiredMixin, graphene.Mutation):
    book = graphene.Field(BookType)

    class Arguments:
        id = graphene.ID(required=True)
        title = graphene.String()
        author_name = graphene.String()
        subtitle = graphene.String()
        description = graphene.String()
        isbn = graphene.String()
        published_year = graphene.Int()
        pages = graphene.Int()

    @classmethod
    def mutate(cls, root, info, id, author_name=None, **kwargs):
        cls.get_user(info)
        _check_positive(publishedYear=kwargs.get('published_year'), pages=kwargs.get('pages'))
        for field in NON_NULL_BOOK_FIELDS:
            if field in kwargs and kwargs[field] is None:
                raise GraphQLError(f'{field} cannot be null.')
        book = _get_book(id)

        if author_name:
            book.author, _ = Author.objects.get_or_create(name=author_name)

        if 'isbn' in kwargs:
            isbn = _clean_isbn(kwargs.pop('isbn'))
            if isbn and Book.objects.filter(isbn=isbn).exclude(pk=book.pk).exists():
                raise GraphQLError(f'A book with ISBN {isbn} already exists.')
            book.isbn = isbn

        for attr, value in kwargs.items():
            setattr(book, attr, value)
        book.save()

        return UpdateBook(book=book)


class DeleteBook(AuthRequiredMixin, graphene.Mutation):
    ok = graphene.Boolean()
    id = graphene.ID()

    class Arguments:
        id = graphene.ID(required=True)

    @classmethod
    def mutate(cls, root, info, id):
        cls.get_user(info)
        book = _get_book(id)
        book.delete()
        return DeleteBook(ok=True, id=id)


class CreateReview(AuthRequiredMixin, graphene.Mutation):
    review = graphene.Field(ReviewType)

    class Arguments:
        book_id = graphene.ID(required=True)
        value = graphene.Int(required=True)
        comment = graphene.String()

    @classmethod
    def mutate(cls, root, info, book_id, value, comment=''):
        user = cls.get_user(info)
        _check_rating(value)
        book = _get_book(book_id)

        if Review.objects.filter(user=user, book=book).exists():
            raise GraphQLError('You have already reviewed this book.')

        review = Review.objects.create(user=user, book=book, value=value, comment=comment or '')
        return CreateReview(review=review)


class UpdateReview(OwnerRequiredMixin, graphene.Mutation):
    review = graphene.Field(ReviewType)

    class Arguments:
        id = graphene.ID(required=True)
        value = graphene.Int()
        comment = graphene.String()

    @classmethod
    def mutate(cls, root, info, id, value=None, comment=None):
        review = Review.objects.filter(pk=id).first()
        if review is None:
            raise GraphQLError(f'Review {id} does not exist.')
        cls.check_owner(info, review)
        _check_rating(value)

        if value is not None:
            review.value = value
        if comment is not None:
            review.comment = comment
        review.save()

        return UpdateReview(review=review)


class DeleteReview(OwnerRequiredMixin, graphene.Mutation):
    ok = graphene.Boolean()

    class Arguments:
        id = graphene.ID(required=True)

    @classmethod
    def mutate(cls, root, info, id):
        review = Review.objects.filter(pk=id).first()
        if review is None:
            raise GraphQLError(f'Review {id} does not exist.')
        cls.check_owner(info, review)
        review.delete()
        return DeleteReview(ok=True)


class Mutation(graphene.ObjectType):
    create_user = CreateUser.Field()
    create_author = CreateAuthor.Field()
    create_book = CreateBook.Field()
    update_book = UpdateBook.Field()
    delete_book = DeleteBook.Field()
    create_review = CreateReview.Field()
    update_review = UpdateReview.Field()
    delete_review = DeleteReview.Field()
