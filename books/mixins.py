from graphql import GraphQLError


class AuthRequiredMixin:
    """
    For mutations that write on behalf of a user. The JWT middleware has
    already resolved the ``Authorization`` header into ``info.context.user``.
    """

    @classmethod
    def get_user(cls, info):
        user = info.context.user
        if not user.is_authenticated:
            raise GraphQLError('You must be logged in to perform this action.')
        return user


class OwnerRequiredMixin(AuthRequiredMixin):

    @classmethod
    def check_owner(cls, info, obj):
        user = cls.get_user(info)
        if obj.user_id != user.id:
            raise GraphQLError('You do not have permission to change this review.')
        return user
