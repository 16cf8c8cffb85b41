from reefql.migrate import Migration, SchemaEditor
from reefql.schema import Table


class CreateArticles(Migration):
    def up(self, schema: SchemaEditor) -> None:
        def declare(table: Table) -> None:
            table.add_primary("id")
            table.add_string("title", 120).not_null()
            table.add_text("content")

        schema.table("articles", declare)

    def down(self, schema: SchemaEditor) -> None:
        schema.drop_table("articles")
