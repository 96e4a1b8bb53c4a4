import graphene
import graphql_jwt

import books.schema


class Query(books.schema.Query, graphene.ObjectType):
    pass


class Mutation(books.schema.Mutation, graphene.ObjectType):
    token_auth = graphql_jwt.ObtainJSONWebToken.Field()
    verify_token = graphql_jwt.Verify.Field()
    refresh_token = graphql_jwt.Refresh.Field()


schema = graphene.Schema(query=Query, mutation=Mutation)
