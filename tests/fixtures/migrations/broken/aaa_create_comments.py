from reefql.migrate import Migration, SchemaEditor


class CreateComment(Migration):
    """Misnamed on purpose: the file name expects ``CreateComments``."""

    def up(self, schema: SchemaEditor) -> None:
        schema.table("comments", lambda table: table.add_primary("id"))

    def down(self, schema: SchemaEditor) -> None:
        schema.drop_table("comments")
