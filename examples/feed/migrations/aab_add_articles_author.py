from reefql.migrate import Migration, SchemaEditor


class AddArticlesAuthor(Migration):
    def up(self, schema: SchemaEditor) -> None:
        schema.table("articles", lambda table: table.add_string("author", 80))

    def down(self, schema: SchemaEditor) -> None:
        schema.table("articles", lambda table: table.drop_column("author"))
